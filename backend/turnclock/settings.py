"""Application configuration via environment variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ledger.ledger import DEFAULT_STATS_KEY
from shared.validators import IntListEnvSettingsSource, parse_int_list
from turnclock.logic.settings import DEFAULT_DURATION_PRESETS, ClockSettings

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class TableTimerSettings(BaseSettings):
    model_config = {"env_prefix": "TABLETIMER_"}

    data_dir: str | None = None  # unset keeps statistics in memory only
    stats_key: str = Field(default=DEFAULT_STATS_KEY, min_length=1)
    log_dir: str | None = None
    default_turn_seconds: int = Field(default=45, gt=0)
    duration_presets: list[int] = list(DEFAULT_DURATION_PRESETS)
    low_time_seconds: int = Field(default=5, ge=0)
    advance_cooldown_seconds: float = Field(default=1.0, ge=0)

    @field_validator("duration_presets", mode="before")
    @classmethod
    def validate_duration_presets(cls, v: str | list[int]) -> list[int]:
        return parse_int_list(v)

    def to_clock_settings(self) -> ClockSettings:
        return ClockSettings(
            default_turn_seconds=self.default_turn_seconds,
            duration_presets=tuple(self.duration_presets),
            low_time_seconds=self.low_time_seconds,
            advance_cooldown_seconds=self.advance_cooldown_seconds,
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, IntListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings
