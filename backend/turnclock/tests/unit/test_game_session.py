import asyncio

import pytest

from ledger.ledger import StatsLedger
from shared.storage import MemoryBlobStore
from turnclock.logic.enums import ClockEvent, ClockPhase, MoveDirection
from turnclock.logic.settings import ClockSettings
from turnclock.session.game import GameSession
from turnclock.tests.mocks import RecordingNotificationSink


@pytest.fixture
def ledger():
    return StatsLedger(MemoryBlobStore(), now=lambda: 1_700_000_000_000)


def _make_session(ledger, turn_seconds):
    return GameSession(
        ledger,
        players=["A", "B", "C"],
        settings=ClockSettings(default_turn_seconds=turn_seconds, advance_cooldown_seconds=0.05),
        notifications=RecordingNotificationSink(),
        tick_interval=0.01,
    )


@pytest.fixture
async def session(ledger):
    game = _make_session(ledger, turn_seconds=30)
    yield game
    game.close()
    await asyncio.sleep(0)


class TestGameSessionSetup:
    async def test_roster_edits_in_setup(self, session):
        session.add_player("D")
        session.move_player(3, MoveDirection.UP)
        session.rename_player(0, "Ann")
        session.remove_player(1)
        assert session.snapshot().player_names == ("Ann", "D", "C")

    async def test_set_duration_in_setup(self, session):
        session.set_duration(60)
        assert session.snapshot().time_left == 60

    async def test_setup_edits_ignored_during_play(self, session):
        session.start_game()
        session.add_player("D")
        session.remove_player(0)
        session.set_duration(60)
        snapshot = session.snapshot()
        assert snapshot.player_names == ("A", "B", "C")
        assert snapshot.turn_duration == 30

    async def test_start_game_waits_for_start(self, session):
        session.start_game()
        assert session.clock.phase == ClockPhase.PAUSED
        assert not session.is_ticking


class TestGameSessionTicking:
    async def test_start_drives_ticks(self, session):
        events = []
        session.subscribe(lambda event, _snapshot: events.append(event))
        session.start()
        await asyncio.sleep(0.05)
        assert session.is_ticking
        assert ClockEvent.TICK in events
        assert session.snapshot().time_left < 30

    async def test_pause_cancels_ticks(self, session):
        session.start()
        session.pause()
        assert not session.is_ticking
        time_left = session.snapshot().time_left
        await asyncio.sleep(0.05)
        assert session.snapshot().time_left == time_left

    async def test_toggle(self, session):
        session.toggle()
        assert session.is_ticking
        session.toggle()
        assert not session.is_ticking

    async def test_turn_expires_and_advances(self, ledger):
        session = _make_session(ledger, turn_seconds=2)
        events = []
        session.subscribe(lambda event, _snapshot: events.append(event))
        session.start()
        await asyncio.sleep(0.1)
        session.close()
        assert ClockEvent.TURN_EXPIRED in events
        assert ClockEvent.TURN_ADVANCED in events

    async def test_manual_advance_debounced(self, session):
        session.start_game(autostart=True)
        assert session.advance() is True
        assert session.advance() is False
        assert session.snapshot().current_player_index == 1
        await asyncio.sleep(0.08)
        assert not session.snapshot().advance_locked

    async def test_advance_from_pause_restarts_ticking(self, session):
        session.start_game()
        session.start()
        session.pause()
        assert session.advance() is True
        assert session.is_ticking

    async def test_open_setup_stops_ticks(self, session):
        session.start()
        session.open_setup()
        assert not session.is_ticking
        assert session.clock.phase == ClockPhase.SETUP


class TestGameSessionEndGame:
    async def test_end_game_records_current_player(self, session, ledger):
        session.start()
        session.advance()
        result = session.end_game()

        assert result is not None
        assert result.winner_name == "B"
        assert result.winner_position == 1
        assert result.round == 1
        assert result.player_names == ("A", "B", "C")
        assert ledger.statistics.player_stats["B"].total_wins == 1
        assert session.clock.phase == ClockPhase.SETUP
        assert not session.is_ticking

    async def test_end_game_with_chosen_winner(self, session, ledger):
        session.start()
        result = session.end_game(winner_index=2)
        assert result is not None
        assert result.winner_name == "C"
        assert ledger.statistics.player_stats["C"].wins_by_position == {2: 1}

    async def test_end_game_ignored_in_setup(self, session, ledger):
        assert session.end_game() is None
        assert ledger.statistics.games == []

    async def test_end_game_invalid_seat_ignored(self, session, ledger):
        session.start_game()
        assert session.end_game(winner_index=7) is None
        assert ledger.statistics.games == []
        assert session.clock.phase == ClockPhase.PAUSED

    async def test_failed_save_still_returns_to_setup(self):
        class FullDiskStore(MemoryBlobStore):
            def set(self, key, value):
                raise OSError("disk full")

        ledger = StatsLedger(FullDiskStore(), now=lambda: 1_700_000_000_000)
        game = _make_session(ledger, turn_seconds=30)
        try:
            game.start_game(autostart=True)
            result = game.end_game()

            assert result is not None
            assert result.winner_name == "A"
            assert ledger.statistics.player_stats["A"].total_wins == 1
            assert game.clock.phase == ClockPhase.SETUP
            assert not game.is_ticking
        finally:
            game.close()

    async def test_close_cancels_everything(self, session):
        session.start()
        session.advance()
        session.close()
        assert not session.is_ticking
