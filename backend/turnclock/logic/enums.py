"""
String enum definitions for turn clock concepts.
"""

from enum import Enum


class ClockPhase(str, Enum):
    """Lifecycle phase of a turn clock."""

    SETUP = "setup"
    RUNNING = "running"
    PAUSED = "paused"


class MoveDirection(str, Enum):
    """Direction to move a player within the seating order."""

    UP = "up"  # towards seat 0
    DOWN = "down"


class ClockEvent(str, Enum):
    """Change notifications delivered to clock subscribers."""

    STARTED = "started"
    PAUSED = "paused"
    TICK = "tick"
    LOW_TIME = "low_time"
    TURN_EXPIRED = "turn_expired"
    TURN_ADVANCED = "turn_advanced"
    COOLDOWN_ENDED = "cooldown_ended"
    ROSTER_CHANGED = "roster_changed"
    DURATION_CHANGED = "duration_changed"
    RESET = "reset"
