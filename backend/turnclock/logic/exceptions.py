"""Typed exceptions for turn clock configuration mistakes.

Gameplay guard clauses (advancing during cooldown, removing the last two
players, moving a seat past the end of the table) are silent no-ops and
never raise. Only invalid configuration passed in by the host raises.
"""


class TurnClockError(Exception):
    """Base exception for turn clock configuration errors."""


class InvalidDurationError(TurnClockError, ValueError):
    """Turn duration is not a positive whole number of seconds."""

    def __init__(self, seconds: object) -> None:
        self.seconds = seconds
        super().__init__(f"turn duration must be a positive integer, got {seconds!r}")


class InvalidRosterError(TurnClockError, ValueError):
    """Initial lineup has fewer players than the table minimum."""

    def __init__(self, count: int, minimum: int) -> None:
        self.count = count
        self.minimum = minimum
        super().__init__(f"at least {minimum} players are required, got {count}")
