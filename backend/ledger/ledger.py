"""Persisted win statistics across game sessions."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from ledger.aggregate import (
    apply_game_added,
    apply_game_removed,
    display_index_to_storage_index,
    rebuild_player_stats,
)
from ledger.models import GameResult, LeaderboardEntry, LedgerView, Statistics

if TYPE_CHECKING:
    from shared.storage import BlobStore

logger = structlog.get_logger()

DEFAULT_STATS_KEY = "statistics"


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class StatsLedger:
    """Game results plus per-player aggregates, rewritten whole on every change.

    A missing or unreadable document is never an error: the ledger starts
    empty and the next save replaces whatever was stored. Saving is best
    effort; a failed write is logged and the in-memory ledger stays current.
    Mutations load the stored document first if ``load`` was never called.
    """

    def __init__(
        self,
        store: BlobStore,
        key: str = DEFAULT_STATS_KEY,
        now: Callable[[], int] | None = None,
    ) -> None:
        self._store = store
        self._key = key
        self._now = now or _epoch_millis
        self._statistics = Statistics()
        self._loaded = False

    @property
    def statistics(self) -> Statistics:
        """Deep copy of the current ledger; mutating it does not affect the ledger."""
        return self._statistics.model_copy(deep=True)

    def load(self) -> Statistics:
        """Read the stored ledger, substituting an empty one on a miss."""
        self._statistics = self._read()
        self._loaded = True
        return self.statistics

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _read(self) -> Statistics:
        try:
            raw = self._store.get(self._key)
        except (OSError, ValueError):  # ValueError covers undecodable bytes
            logger.warning("statistics unreadable, starting empty", key=self._key, exc_info=True)
            return Statistics()
        if raw is None:
            logger.debug("no stored statistics", key=self._key)
            return Statistics()

        try:
            statistics = Statistics.model_validate_json(raw)
        except ValidationError:
            logger.warning("stored statistics are corrupt, starting empty", key=self._key)
            return Statistics()

        derived = rebuild_player_stats(statistics.games)
        if derived != statistics.player_stats:
            logger.warning(
                "stored player stats disagree with game history, rebuilding",
                key=self._key,
                games=len(statistics.games),
            )
            statistics = Statistics(games=statistics.games, player_stats=derived)
        return statistics

    def save(self, statistics: Statistics | None = None) -> bool:
        """Persist the whole ledger, optionally replacing it with ``statistics`` first.

        Returns False when the store rejected the write.
        """
        if statistics is not None:
            self._statistics = statistics.model_copy(deep=True)
            self._loaded = True
        try:
            self._store.set(self._key, self._statistics.model_dump_json(by_alias=True))
        except (OSError, ValueError):
            logger.exception("failed to save statistics", key=self._key)
            return False
        return True

    def add_game(
        self,
        winner_name: str,
        round: int,  # noqa: A002
        winner_position: int,
        player_names: Sequence[str],
    ) -> GameResult:
        """Record a finished game and update the winner's stats."""
        self._ensure_loaded()
        game = GameResult(
            winner_name=winner_name,
            round=round,
            winner_position=winner_position,
            player_names=tuple(player_names),
            timestamp=self._now(),
        )
        games = [*self._statistics.games, game]
        player_stats = apply_game_added(self._statistics.player_stats, games, game)
        self._statistics = Statistics(games=games, player_stats=player_stats)
        logger.info(
            "game recorded",
            winner=winner_name,
            round=round,
            position=winner_position,
            total_wins=player_stats[winner_name].total_wins,
        )
        self.save()
        return game

    def delete_game(self, index: int) -> GameResult | None:
        """Remove the game at ``index`` in chronological order.

        An index outside the game list is a caller error; it is logged and
        ignored. Newest-first callers should use ``delete_displayed_game``.
        """
        self._ensure_loaded()
        games = self._statistics.games
        if not 0 <= index < len(games):
            logger.warning("delete ignored, no game at index", index=index, games=len(games))
            return None

        removed = games[index]
        remaining = games[:index] + games[index + 1 :]
        player_stats = apply_game_removed(self._statistics.player_stats, remaining, removed)
        self._statistics = Statistics(games=remaining, player_stats=player_stats)
        logger.info("game deleted", index=index, winner=removed.winner_name, round=removed.round)
        self.save()
        return removed

    def delete_displayed_game(self, display_index: int) -> GameResult | None:
        """Remove a game identified by its position in the newest-first history."""
        self._ensure_loaded()
        try:
            index = display_index_to_storage_index(display_index, len(self._statistics.games))
        except IndexError:
            logger.warning("delete ignored, no game at display index", display_index=display_index)
            return None
        return self.delete_game(index)

    def clear(self) -> None:
        """Drop all recorded games and stats."""
        self._statistics = Statistics()
        self._loaded = True
        logger.info("statistics cleared", key=self._key)
        self.save()

    def query(self) -> LedgerView:
        """Leaderboard by total wins (ties keep first-win order) and newest-first history."""
        ranked = sorted(
            self._statistics.player_stats.items(),
            key=lambda item: item[1].total_wins,
            reverse=True,
        )
        return LedgerView(
            leaderboard=tuple(
                LeaderboardEntry(name=name, stats=stats.model_copy(deep=True)) for name, stats in ranked
            ),
            history=tuple(reversed(self._statistics.games)),
        )
