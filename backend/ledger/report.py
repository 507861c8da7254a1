"""Plain-text rendering of a ledger view for terminals and logs."""

from datetime import UTC, datetime

from ledger.models import LedgerView


def format_leaderboard(view: LedgerView) -> list[str]:
    if not view.leaderboard:
        return ["No games recorded yet."]
    lines = []
    for rank, entry in enumerate(view.leaderboard, start=1):
        stats = entry.stats
        seats = ", ".join(f"#{pos + 1}: {count}" for pos, count in sorted(stats.wins_by_position.items()))
        lines.append(
            f"{rank}. {entry.name} - {stats.total_wins} wins, "
            f"avg round {stats.average_round_of_win:.1f} ({seats})",
        )
    return lines


def format_history(view: LedgerView) -> list[str]:
    """One line per game, newest first, numbered by display index."""
    lines = []
    for display_index, game in enumerate(view.history):
        played_at = datetime.fromtimestamp(game.timestamp / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M")
        lineup = ", ".join(game.player_names)
        lines.append(
            f"[{display_index}] {played_at} {game.winner_name} won from seat #{game.winner_position + 1} "
            f"in round {game.round} ({lineup})",
        )
    return lines
