"""
Pydantic models for turn clock data crossing component boundaries.
"""

from pydantic import BaseModel, ConfigDict

from turnclock.logic.enums import ClockPhase


class Player(BaseModel):
    """A seat at the table. ``id`` survives reorders and renames."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class ClockSnapshot(BaseModel):
    """Read-only view of a turn clock, handed to hosts and subscribers."""

    model_config = ConfigDict(frozen=True)

    players: tuple[Player, ...]
    current_player_index: int
    is_running: bool
    turn_duration: int
    time_left: int
    round: int
    advance_locked: bool
    phase: ClockPhase

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def player_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.players)

