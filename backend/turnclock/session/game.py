"""Host-facing game session: a turn clock, its timers and the statistics ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from turnclock.logic.clock import TurnClock
from turnclock.logic.enums import ClockPhase
from turnclock.session.timers import TICK_INTERVAL_SECONDS, CooldownScheduler, TickTimer

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ledger.ledger import StatsLedger
    from ledger.models import GameResult
    from turnclock.logic.clock import ClockListener
    from turnclock.logic.enums import MoveDirection
    from turnclock.logic.notifications import NotificationSink
    from turnclock.logic.settings import ClockSettings
    from turnclock.logic.types import ClockSnapshot

logger = structlog.get_logger()


class GameSession:
    """Drive a TurnClock from the event loop and record finished games.

    Must be used from within a running asyncio event loop once the clock
    starts. Roster and duration edits are only accepted during setup;
    outside it they are ignored.
    """

    def __init__(
        self,
        ledger: StatsLedger,
        *,
        players: Iterable[str] | None = None,
        settings: ClockSettings | None = None,
        notifications: NotificationSink | None = None,
        tick_interval: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        self._ledger = ledger
        self._cooldowns = CooldownScheduler()
        self._clock = TurnClock(
            players,
            schedule=self._cooldowns.schedule,
            settings=settings,
            notifications=notifications,
        )
        self._tick_timer = TickTimer(self._clock.tick, interval=tick_interval)

    @property
    def clock(self) -> TurnClock:
        return self._clock

    @property
    def ledger(self) -> StatsLedger:
        return self._ledger

    @property
    def is_ticking(self) -> bool:
        return self._tick_timer.is_active

    def snapshot(self) -> ClockSnapshot:
        return self._clock.snapshot()

    def subscribe(self, listener: ClockListener) -> Callable[[], None]:
        return self._clock.subscribe(listener)

    # ── Gameplay ────────────────────────────────────────────────────────

    def start_game(self, *, autostart: bool = False) -> None:
        """Leave setup. The countdown waits for ``start()`` unless autostart is set."""
        if autostart:
            self._clock.start()
        else:
            self._clock.begin_game()
        self._sync_tick_timer()

    def start(self) -> None:
        self._clock.start()
        self._sync_tick_timer()

    def pause(self) -> None:
        self._clock.pause()
        self._sync_tick_timer()

    def toggle(self) -> None:
        self._clock.toggle()
        self._sync_tick_timer()

    def advance(self) -> bool:
        """Manually pass the turn and restart the tick interval for the next player."""
        if not self._clock.advance():
            return False
        self._tick_timer.start()
        return True

    def end_game(self, winner_index: int | None = None) -> GameResult | None:
        """Record the game won by the given seat (default: current player) and return to setup."""
        snapshot = self._clock.snapshot()
        if snapshot.phase == ClockPhase.SETUP:
            logger.debug("end_game ignored during setup")
            return None
        position = snapshot.current_player_index if winner_index is None else winner_index
        if not 0 <= position < len(snapshot.players):
            logger.warning("end_game ignored, no player at seat", seat=position, players=len(snapshot.players))
            return None

        result = self._ledger.add_game(
            winner_name=snapshot.players[position].name,
            round=snapshot.round,
            winner_position=position,
            player_names=snapshot.player_names,
        )
        self.open_setup()
        return result

    def open_setup(self) -> None:
        """Abandon the current countdown and return to setup, keeping the lineup and duration."""
        self._tick_timer.cancel()
        self._clock.reset()

    # ── Setup ───────────────────────────────────────────────────────────

    def set_duration(self, seconds: int) -> None:
        if self._guard_setup("set_duration"):
            self._clock.set_duration(seconds)

    def add_player(self, name: str | None = None) -> None:
        if self._guard_setup("add_player"):
            self._clock.add_player(name)

    def remove_player(self, index: int) -> None:
        if self._guard_setup("remove_player"):
            self._clock.remove_player(index)

    def move_player(self, index: int, direction: MoveDirection) -> None:
        if self._guard_setup("move_player"):
            self._clock.move_player(index, direction)

    def rename_player(self, index: int, name: str) -> None:
        if self._guard_setup("rename_player"):
            self._clock.rename_player(index, name)

    def close(self) -> None:
        """Cancel the tick loop and any pending cooldown callbacks."""
        self._tick_timer.cancel()
        self._cooldowns.cancel_all()

    # ── Internal ────────────────────────────────────────────────────────

    def _guard_setup(self, operation: str) -> bool:
        if self._clock.phase != ClockPhase.SETUP:
            logger.debug("setup operation ignored during play", operation=operation)
            return False
        return True

    def _sync_tick_timer(self) -> None:
        if self._clock.is_running and not self._tick_timer.is_active:
            self._tick_timer.start()
        elif not self._clock.is_running:
            self._tick_timer.cancel()
