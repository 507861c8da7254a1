"""
Turn clock: whose turn it is, how long they have left, and which round it is.

The clock is a synchronous state machine. It does not own the one-second
tick driver; the host calls ``tick()`` once per elapsed second while the
clock runs. The only timing it schedules itself is the advance cooldown,
handed to an injected ``schedule(delay, callback)`` so that the debounce
runs on wall-clock time independent of the tick driver.

Phases: SETUP -> RUNNING on ``start()``, RUNNING <-> PAUSED on
``start()``/``pause()``, any phase -> SETUP on ``reset()``. The cooldown
after an advance is a sub-state of RUNNING/PAUSED exposed as
``advance_locked``: while it is set, further advances are silent no-ops, so
a manual advance racing a timer expiry produces exactly one transition.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

import structlog

from turnclock.logic import roster as seats
from turnclock.logic.enums import ClockEvent, ClockPhase, MoveDirection
from turnclock.logic.exceptions import InvalidDurationError, InvalidRosterError
from turnclock.logic.notifications import NotificationSink, SilentNotificationSink
from turnclock.logic.settings import ClockSettings
from turnclock.logic.types import ClockSnapshot, Player

if TYPE_CHECKING:
    from turnclock.logic.roster import Roster

logger = structlog.get_logger()

# (delay_seconds, callback) -> handle; the handle is not used by the clock
UnlockScheduler = Callable[[float, Callable[[], None]], object]
ClockListener = Callable[[ClockEvent, ClockSnapshot], None]


def _validate_duration(seconds: object) -> int:
    if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
        raise InvalidDurationError(seconds)
    return seconds


class TurnClock:
    """Countdown clock for a table of players taking turns in order."""

    def __init__(
        self,
        players: Iterable[str] | None = None,
        *,
        schedule: UnlockScheduler,
        turn_duration: int | None = None,
        settings: ClockSettings | None = None,
        notifications: NotificationSink | None = None,
    ) -> None:
        self._settings = settings or ClockSettings()
        names = tuple(players) if players is not None else self._settings.default_player_names
        if len(names) < self._settings.min_players:
            raise InvalidRosterError(len(names), self._settings.min_players)
        self._players: Roster = seats.create_roster(names, name_template=self._settings.new_player_name_template)
        self._turn_duration = _validate_duration(
            turn_duration if turn_duration is not None else self._settings.default_turn_seconds,
        )
        self._schedule = schedule
        self._notifications: NotificationSink = notifications or SilentNotificationSink()
        self._listeners: list[ClockListener] = []

        self._current_index = 0
        self._running = False
        self._in_setup = True
        self._time_left = self._turn_duration
        self._round = 1
        self._advance_locked = False
        self._cooldown_generation = 0

    # ── State accessors ─────────────────────────────────────────────────

    @property
    def players(self) -> Roster:
        return self._players

    @property
    def current_player_index(self) -> int:
        return self._current_index

    @property
    def current_player(self) -> Player:
        return self._players[self._current_index]

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def turn_duration(self) -> int:
        return self._turn_duration

    @property
    def time_left(self) -> int:
        return self._time_left

    @property
    def round(self) -> int:
        return self._round

    @property
    def advance_locked(self) -> bool:
        return self._advance_locked

    @property
    def phase(self) -> ClockPhase:
        if self._in_setup:
            return ClockPhase.SETUP
        return ClockPhase.RUNNING if self._running else ClockPhase.PAUSED

    @property
    def settings(self) -> ClockSettings:
        return self._settings

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            players=self._players,
            current_player_index=self._current_index,
            is_running=self._running,
            turn_duration=self._turn_duration,
            time_left=self._time_left,
            round=self._round,
            advance_locked=self._advance_locked,
            phase=self.phase,
        )

    def subscribe(self, listener: ClockListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── Running / paused ────────────────────────────────────────────────

    def start(self) -> None:
        """Start the countdown, leaving setup if needed. No-op while running."""
        if self._running:
            return
        if self._in_setup:
            self._leave_setup()
        self._running = True
        self._emit(ClockEvent.STARTED)

    def pause(self) -> None:
        if not self._running:
            return
        self._running = False
        self._emit(ClockEvent.PAUSED)

    def toggle(self) -> None:
        if self._running:
            self.pause()
        else:
            self.start()

    def begin_game(self) -> None:
        """Leave setup without starting the countdown."""
        if not self._in_setup:
            return
        self._leave_setup()
        self._emit(ClockEvent.PAUSED)

    def tick(self) -> None:
        """Account for one elapsed second.

        A tick that would take the clock to zero expires the turn instead:
        the turn advances and the countdown restarts at the full duration.
        Ticks while paused or in setup are ignored.
        """
        if not self._running or self._time_left <= 0:
            return

        if self._time_left <= 1:
            expired = self.current_player
            logger.info("turn expired", player=expired.name, round=self._round)
            self._notifications.notify_turn_expired(expired)
            advanced = self._advance()
            self._time_left = self._turn_duration
            self._emit(ClockEvent.TURN_EXPIRED)
            self._emit(ClockEvent.TURN_ADVANCED if advanced else ClockEvent.TICK)
            return

        self._time_left -= 1
        if self._time_left <= self._settings.low_time_seconds:
            self._notifications.notify_low_time(self._time_left)
            self._emit(ClockEvent.LOW_TIME)
        self._emit(ClockEvent.TICK)

    def advance(self) -> bool:
        """Pass the turn to the next player.

        Returns False without changing anything while in setup or during the
        cooldown that follows the previous advance.
        """
        if not self._advance():
            return False
        self._emit(ClockEvent.TURN_ADVANCED)
        return True

    def _advance(self) -> bool:
        if self._in_setup:
            return False
        if self._advance_locked:
            logger.debug("advance ignored during cooldown", player=self.current_player.name)
            return False

        self._advance_locked = True
        self._cooldown_generation += 1
        generation = self._cooldown_generation

        next_index = (self._current_index + 1) % len(self._players)
        if next_index == 0:
            self._round += 1
        self._current_index = next_index
        self._time_left = self._turn_duration
        self._running = True

        self._schedule(self._settings.advance_cooldown_seconds, lambda: self._release_lock(generation))
        logger.info("turn advanced", player=self.current_player.name, seat=next_index, round=self._round)
        return True

    def _release_lock(self, generation: int) -> None:
        # a reset or a later advance supersedes this cooldown
        if generation != self._cooldown_generation or not self._advance_locked:
            return
        self._advance_locked = False
        self._emit(ClockEvent.COOLDOWN_ENDED)

    # ── Configuration ───────────────────────────────────────────────────

    def set_duration(self, seconds: int) -> None:
        """Change the turn length and restart the current countdown at it."""
        self._turn_duration = _validate_duration(seconds)
        self._time_left = self._turn_duration
        self._emit(ClockEvent.DURATION_CHANGED)

    def add_player(self, name: str | None = None) -> None:
        if name is None:
            name = self._settings.new_player_name_template.format(number=len(self._players) + 1)
        self._set_roster(seats.add_player(self._players, name))

    def remove_player(self, index: int) -> None:
        self._set_roster(seats.remove_player(self._players, index, min_players=self._settings.min_players))

    def move_player(self, index: int, direction: MoveDirection) -> None:
        self._set_roster(seats.move_player(self._players, index, direction))

    def rename_player(self, index: int, name: str) -> None:
        self._set_roster(seats.rename_player(self._players, index, name))

    def reset(self, initial_duration: int | None = None) -> None:
        """Return to setup: first seat, round 1, full time, stopped, unlocked.

        The lineup is kept. A given duration also becomes the turn length.
        """
        if initial_duration is not None:
            self._turn_duration = _validate_duration(initial_duration)
        self._current_index = 0
        self._running = False
        self._in_setup = True
        self._round = 1
        self._time_left = self._turn_duration
        self._advance_locked = False
        self._cooldown_generation += 1
        self._emit(ClockEvent.RESET)

    # ── Internal ────────────────────────────────────────────────────────

    def _leave_setup(self) -> None:
        self._in_setup = False
        logger.info("game started", players=[p.name for p in self._players], turn_seconds=self._turn_duration)
        self._notifications.notify_game_started()

    def _set_roster(self, roster: Roster) -> None:
        if roster is self._players:
            return
        self._players = roster
        if self._current_index >= len(roster):
            self._current_index = len(roster) - 1
        self._emit(ClockEvent.ROSTER_CHANGED)

    def _emit(self, event: ClockEvent) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(event, snapshot)
            except Exception:
                logger.exception("clock listener failed", clock_event=event)
