"""
Seating order operations.

A roster is an immutable tuple of players; its order is the turn order.
Every function returns a new tuple and leaves the input untouched. Guard
violations (shrinking below the minimum, moving past either end, blank
names, unknown seats) return the roster unchanged.
"""

from collections.abc import Iterable

from turnclock.logic.enums import MoveDirection
from turnclock.logic.types import Player

Roster = tuple[Player, ...]

DEFAULT_NAME_TEMPLATE = "Player {number}"


def _clean_name(name: str) -> str:
    return name.strip()


def create_roster(names: Iterable[str], *, name_template: str = DEFAULT_NAME_TEMPLATE) -> Roster:
    """Build a roster with ids 1..N in the given seating order.

    A blank name takes the seat's default from ``name_template``.
    """
    return tuple(
        Player(id=i, name=_clean_name(name) or name_template.format(number=i))
        for i, name in enumerate(names, start=1)
    )


def next_player_id(roster: Roster) -> int:
    return max((p.id for p in roster), default=0) + 1


def add_player(roster: Roster, name: str) -> Roster:
    """Seat a new player at the end of the table.

    A blank name is ignored.
    """
    cleaned = _clean_name(name)
    if not cleaned:
        return roster
    return (*roster, Player(id=next_player_id(roster), name=cleaned))


def remove_player(roster: Roster, index: int, *, min_players: int = 2) -> Roster:
    if len(roster) <= min_players or not 0 <= index < len(roster):
        return roster
    return roster[:index] + roster[index + 1 :]


def move_player(roster: Roster, index: int, direction: MoveDirection) -> Roster:
    """Swap a player with the adjacent seat in the given direction."""
    target = index - 1 if direction == MoveDirection.UP else index + 1
    if not 0 <= index < len(roster) or not 0 <= target < len(roster):
        return roster
    seats = list(roster)
    seats[index], seats[target] = seats[target], seats[index]
    return tuple(seats)


def rename_player(roster: Roster, index: int, name: str) -> Roster:
    cleaned = _clean_name(name)
    if not cleaned or not 0 <= index < len(roster):
        return roster
    seats = list(roster)
    seats[index] = seats[index].model_copy(update={"name": cleaned})
    return tuple(seats)
