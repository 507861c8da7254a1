"""Gameplay settings for the turn clock."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_DURATION_PRESETS = (25, 30, 35, 40, 45, 60)


class ClockSettings(BaseModel):
    """
    Configuration for a turn clock.

    Duration presets are the choices offered by a host UI; the clock itself
    accepts any positive number of seconds.
    """

    model_config = ConfigDict(frozen=True)

    default_turn_seconds: int = Field(default=45, gt=0)
    duration_presets: tuple[int, ...] = DEFAULT_DURATION_PRESETS
    low_time_seconds: int = Field(default=5, ge=0)
    advance_cooldown_seconds: float = Field(default=1.0, ge=0)
    min_players: int = Field(default=2, ge=1)
    default_player_names: tuple[str, ...] = ("Player 1", "Player 2", "Player 3")
    new_player_name_template: str = "Player {number}"

    @model_validator(mode="after")
    def _check_consistency(self) -> "ClockSettings":
        if any(preset <= 0 for preset in self.duration_presets):
            raise ValueError("duration presets must be positive")
        if len(self.default_player_names) < self.min_players:
            raise ValueError(f"default lineup needs at least {self.min_players} players")
        return self
