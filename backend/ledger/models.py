"""
Persistence models for the statistics ledger.

The persisted document uses camelCase keys::

    {"games": [{"winnerName": ..., "round": ..., "winnerPosition": ...,
                "playerNames": [...], "timestamp": ...}],
     "playerStats": {"<name>": {"totalWins": ..., "winsByPosition": {"0": 1},
                                "averageRoundOfWin": ...}}}
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_DOCUMENT_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GameResult(BaseModel):
    """A finished game. Never modified after it is recorded."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    winner_name: str
    round: int = Field(ge=1)
    winner_position: int = Field(ge=0)  # 0-based seat index at the time of the win
    player_names: tuple[str, ...] = ()  # lineup snapshot in seating order
    timestamp: int  # epoch milliseconds


class PlayerStats(BaseModel):
    """Aggregates for one winner, derived entirely from the game list."""

    model_config = _DOCUMENT_CONFIG

    total_wins: int = Field(ge=1)
    wins_by_position: dict[int, int] = Field(default_factory=dict)  # only positive counts
    average_round_of_win: float


class Statistics(BaseModel):
    """Root ledger document: chronological games plus the cached per-player view."""

    model_config = _DOCUMENT_CONFIG

    games: list[GameResult] = Field(default_factory=list)
    player_stats: dict[str, PlayerStats] = Field(default_factory=dict)


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    stats: PlayerStats


class LedgerView(BaseModel):
    """Display-ready ledger: leaderboard by wins, history newest first."""

    model_config = ConfigDict(frozen=True)

    leaderboard: tuple[LeaderboardEntry, ...]
    history: tuple[GameResult, ...]
