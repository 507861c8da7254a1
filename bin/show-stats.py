"""Show or edit the stored game statistics.

Reads the ledger from TABLETIMER_DATA_DIR (or --data-dir) and prints the
leaderboard followed by the newest-first game history.

Usage:
    uv run python bin/show-stats.py
    uv run python bin/show-stats.py --data-dir backend/data
    uv run python bin/show-stats.py --delete 0
    uv run python bin/show-stats.py --clear
"""

from __future__ import annotations

import argparse
import logging
import sys

from ledger.report import format_history, format_leaderboard
from turnclock.app import configure_logging, create_ledger
from turnclock.settings import TableTimerSettings


def main() -> None:
    parser = argparse.ArgumentParser(description="Show stored game statistics")
    parser.add_argument("--data-dir", help="directory holding the statistics file (default: TABLETIMER_DATA_DIR)")
    parser.add_argument(
        "--delete",
        type=int,
        metavar="N",
        help="delete the game shown as [N] in the history before printing",
    )
    parser.add_argument("--clear", action="store_true", help="delete all recorded games")
    parser.add_argument("-v", "--verbose", action="store_true", help="log ledger activity")
    args = parser.parse_args()

    overrides = {"data_dir": args.data_dir} if args.data_dir else {}
    settings = TableTimerSettings(**overrides)
    configure_logging(settings, level=logging.INFO if args.verbose else logging.WARNING)

    if settings.data_dir is None:
        print("No data directory configured (set TABLETIMER_DATA_DIR or pass --data-dir)", file=sys.stderr)
        sys.exit(1)

    ledger = create_ledger(settings)
    if args.clear:
        ledger.clear()
    elif args.delete is not None and ledger.delete_displayed_game(args.delete) is None:
        print(f"No game at history index {args.delete}", file=sys.stderr)
        sys.exit(1)

    view = ledger.query()
    print("Leaderboard")
    for line in format_leaderboard(view):
        print(f"  {line}")
    print()
    print("History")
    for line in format_history(view) or ["(empty)"]:
        print(f"  {line}")


if __name__ == "__main__":
    main()
