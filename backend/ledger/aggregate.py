"""
Derive per-player win statistics from the game list.

``Statistics.player_stats`` is a cache over ``Statistics.games``. Adding a
game updates the winner's counts incrementally; removing one decrements
them. The average round is always re-scanned from the games so it cannot
drift, and ``rebuild_player_stats`` re-derives the whole cache.
"""

from collections.abc import Sequence

from ledger.models import GameResult, PlayerStats


def mean_round_of_wins(games: Sequence[GameResult], winner_name: str) -> float | None:
    rounds = [game.round for game in games if game.winner_name == winner_name]
    if not rounds:
        return None
    return sum(rounds) / len(rounds)


def compute_player_stats(games: Sequence[GameResult], winner_name: str) -> PlayerStats | None:
    """Full re-scan for one player. None when they have no wins."""
    wins = [game for game in games if game.winner_name == winner_name]
    if not wins:
        return None
    by_position: dict[int, int] = {}
    for game in wins:
        by_position[game.winner_position] = by_position.get(game.winner_position, 0) + 1
    return PlayerStats(
        total_wins=len(wins),
        wins_by_position=by_position,
        average_round_of_win=sum(game.round for game in wins) / len(wins),
    )


def rebuild_player_stats(games: Sequence[GameResult]) -> dict[str, PlayerStats]:
    """Derive the whole cache. Keys follow the order of each player's first win."""
    result: dict[str, PlayerStats] = {}
    for game in games:
        if game.winner_name not in result:
            stats = compute_player_stats(games, game.winner_name)
            if stats is not None:
                result[game.winner_name] = stats
    return result


def apply_game_added(
    player_stats: dict[str, PlayerStats],
    games: Sequence[GameResult],
    game: GameResult,
) -> dict[str, PlayerStats]:
    """Return the cache updated for ``game``, which must already be in ``games``."""
    average = mean_round_of_wins(games, game.winner_name)
    if average is None:
        raise ValueError(f"game won by {game.winner_name!r} is not in the game list")

    updated = dict(player_stats)
    previous = updated.get(game.winner_name)
    by_position = dict(previous.wins_by_position) if previous else {}
    by_position[game.winner_position] = by_position.get(game.winner_position, 0) + 1
    updated[game.winner_name] = PlayerStats(
        total_wins=(previous.total_wins if previous else 0) + 1,
        wins_by_position=by_position,
        average_round_of_win=average,
    )
    return updated


def apply_game_removed(
    player_stats: dict[str, PlayerStats],
    remaining_games: Sequence[GameResult],
    game: GameResult,
) -> dict[str, PlayerStats]:
    """Return the cache updated for the removal of ``game``.

    ``remaining_games`` is the game list after the removal. A player left
    without wins is dropped entirely.
    """
    updated = dict(player_stats)
    previous = updated.get(game.winner_name)
    if previous is None:
        # cache was missing the winner; fall back to a full re-derivation
        return rebuild_player_stats(remaining_games)

    total_wins = previous.total_wins - 1
    if total_wins <= 0:
        del updated[game.winner_name]
        return updated

    by_position = dict(previous.wins_by_position)
    count = by_position.get(game.winner_position, 0) - 1
    if count > 0:
        by_position[game.winner_position] = count
    else:
        by_position.pop(game.winner_position, None)

    average = mean_round_of_wins(remaining_games, game.winner_name)
    updated[game.winner_name] = PlayerStats(
        total_wins=total_wins,
        wins_by_position=by_position,
        average_round_of_win=average if average is not None else previous.average_round_of_win,
    )
    return updated


def display_index_to_storage_index(display_index: int, game_count: int) -> int:
    """Translate a newest-first history index into the chronological list index.

    Raises IndexError when ``display_index`` does not name a game.
    """
    if not 0 <= display_index < game_count:
        raise IndexError(f"display index {display_index} out of range for {game_count} games")
    return game_count - 1 - display_index
