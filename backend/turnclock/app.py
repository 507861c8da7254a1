"""Wire settings, storage, the statistics ledger and a game session together."""

from collections.abc import Iterable
from pathlib import Path

import structlog

from ledger.ledger import StatsLedger
from shared.logging import setup_logging
from shared.storage import BlobStore, LocalBlobStore, MemoryBlobStore
from turnclock.logic.notifications import NotificationSink
from turnclock.session.game import GameSession
from turnclock.session.timers import TICK_INTERVAL_SECONDS
from turnclock.settings import TableTimerSettings

logger = structlog.get_logger()


def configure_logging(settings: TableTimerSettings, level: int | None = None) -> Path | None:
    """Set up logging, writing a session log under ``settings.log_dir`` when one is configured."""
    log_path = setup_logging(settings.log_dir, level=level)
    if log_path is not None:
        logger.info("session log opened", path=str(log_path))
    return log_path


def create_store(settings: TableTimerSettings) -> BlobStore:
    if settings.data_dir is None:
        return MemoryBlobStore()
    return LocalBlobStore(settings.data_dir)


def create_ledger(settings: TableTimerSettings, store: BlobStore | None = None) -> StatsLedger:
    """Build a ledger and load whatever statistics are already stored."""
    ledger = StatsLedger(store if store is not None else create_store(settings), key=settings.stats_key)
    statistics = ledger.load()
    logger.info("statistics loaded", games=len(statistics.games), players=len(statistics.player_stats))
    return ledger


def create_session(
    settings: TableTimerSettings | None = None,
    store: BlobStore | None = None,
    notifications: NotificationSink | None = None,
    players: Iterable[str] | None = None,
    tick_interval: float = TICK_INTERVAL_SECONDS,
) -> GameSession:
    if settings is None:
        settings = TableTimerSettings()
    return GameSession(
        create_ledger(settings, store),
        players=players,
        settings=settings.to_clock_settings(),
        notifications=notifications,
        tick_interval=tick_interval,
    )
