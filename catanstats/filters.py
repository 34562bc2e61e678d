"""Filters selecting the games that feed the aggregation engine.

Every filter is pure, order-preserving and idempotent.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence

from .constants import (
    COMPLETENESS_REQUIREMENTS,
    ORDER_FIELD,
    POINT_DETAIL_FIELDS,
    REQUIRE_ORDER,
    REQUIRE_POINT_DETAILS,
)
from .models import Game


@dataclass(frozen=True)
class FilterCriteria:
    """Active filter settings. Defaults pass every game."""
    start: Optional[date] = None
    end: Optional[date] = None
    players: frozenset[str] = field(default_factory=frozenset)
    required: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        unknown = set(self.required) - set(COMPLETENESS_REQUIREMENTS)
        if unknown:
            raise ValueError(f'Invalid completeness requirement: {", ".join(sorted(unknown))}')


def filter_by_date(
    games: Sequence[Game], start: Optional[date], end: Optional[date]
) -> list[Game]:
    """
    Keep games played within the inclusive [start, end] range.

    An open range (either bound missing) passes everything. With a closed
    range, games whose date could not be parsed are dropped.
    """
    if start is None or end is None:
        return list(games)
    return [g for g in games if g.played_on is not None and start <= g.played_on <= end]


def filter_by_players(games: Sequence[Game], whitelist: Iterable[str]) -> list[Game]:
    """
    Keep games in which every participant is whitelisted.

    An empty whitelist means "not configured yet" and passes everything.
    """
    allowed = set(whitelist)
    if not allowed:
        return list(games)
    return [g for g in games if all(p.name in allowed for p in g.players)]


def filter_by_completeness(games: Sequence[Game], required: Iterable[str]) -> list[Game]:
    """
    Drop games missing the required stats categories.

    Args:
        games: Games to filter
        required: Subset of {'order', 'point-details'}; 'point-details'
            needs base, development and extra points

    Completeness is judged on the first player's record.
    """
    required = set(required)
    if not required:
        return list(games)

    kept = []
    for game in games:
        if game.players:
            missing = set(game.players[0].missing_fields)
        else:
            missing = {ORDER_FIELD, *POINT_DETAIL_FIELDS}
        if REQUIRE_ORDER in required and ORDER_FIELD in missing:
            continue
        if REQUIRE_POINT_DETAILS in required and missing.intersection(POINT_DETAIL_FIELDS):
            continue
        kept.append(game)
    return kept


def apply_filters(games: Sequence[Game], criteria: FilterCriteria) -> list[Game]:
    """Apply the date, player and completeness filters, in that order."""
    selected = filter_by_date(games, criteria.start, criteria.end)
    selected = filter_by_players(selected, criteria.players)
    return filter_by_completeness(selected, criteria.required)


def available_players(games: Iterable[Game]) -> list[str]:
    """Distinct player names in order of first appearance."""
    names: dict[str, None] = {}
    for game in games:
        for player in game.players:
            names.setdefault(player.name, None)
    return list(names)
