"""Decoders for the compact per-column micro-formats of the export."""

import logging
import re
from datetime import date, datetime
from typing import Dict, Optional

from .config import get_date_formats, get_extra_points_accumulation
from .constants import (
    BASE_MARKERS,
    DEFENDER_PATTERN,
    DEVELOPMENT_MARKERS,
    EXTRA_POINT_TOKENS,
    EXTRA_POINTS_DELIMITER,
    ExtraPointKind,
)
from .exceptions import MalformedField, UnrecognizedField
from .models import Base, Development, ExtraPoints

logger = logging.getLogger('catanstats.decoders')

ACCUMULATE_SUM = 'sum'
ACCUMULATE_LEGACY = 'legacy'


def _marker_count(cell: str, marker: str) -> int:
    """Return the digit group immediately before `marker`, or 0 if the marker is absent."""
    match = re.search(rf'(\d+){marker}', cell or '')
    return int(match.group(1)) if match else 0


def parse_base(cell: str) -> Base:
    """
    Decode a "Base" cell into building counts.

    Format:
        - "<n>c": cities
        - "<n>s": settlements
        Markers are independent and may appear in any order; a missing
        marker counts as zero.

    Examples:
        "4c2s" -> Base(cities=4, settlements=2)
        "2s"   -> Base(cities=0, settlements=2)
        ""     -> Base(cities=0, settlements=0)
    """
    return Base(
        cities=_marker_count(cell, BASE_MARKERS['cities']),
        settlements=_marker_count(cell, BASE_MARKERS['settlements']),
    )


def parse_development(cell: str) -> Development:
    """
    Decode a "Development" cell into city improvement levels.

    Format:
        - "<n>y": trade (yellow)
        - "<n>b": politics (blue)
        - "<n>g": science (green)

    Example:
        "3y1b2g" -> Development(trade=3, politics=1, science=2)
    """
    return Development(
        trade=_marker_count(cell, DEVELOPMENT_MARKERS['trade']),
        politics=_marker_count(cell, DEVELOPMENT_MARKERS['politics']),
        science=_marker_count(cell, DEVELOPMENT_MARKERS['science']),
    )


def resolve_extra_point_token(token: str) -> tuple[ExtraPointKind, int]:
    """
    Map a single extra-points token to its kind and point value.

    Scoring:
        - roads: 2 points (longest road)
        - merchant: 1 point
        - my / mb / mg: 2 points (trade / politics / science metropolis)
        - vb / vg: 1 point (politics / science victory card)
        - <digit>d: defender of Catan, one point per card

    Raises:
        UnrecognizedField: If the token is not in the lookup table
    """
    defender = re.match(DEFENDER_PATTERN, token)
    if defender:
        return ExtraPointKind.DEFENDER, int(defender.group(1))

    if token not in EXTRA_POINT_TOKENS:
        raise UnrecognizedField(token, 'extra points')
    return EXTRA_POINT_TOKENS[token]


def parse_extra_points(cell: str, accumulate: Optional[str] = None) -> ExtraPoints:
    """
    Decode an "Extra points" cell such as "roads, my, 2d".

    The total is always the sum of every token. Per-kind points depend on
    the accumulation mode:
        - 'sum': repeated kinds add up
        - 'legacy': the first non-zero value of a kind is kept and later
          tokens of the same kind are dropped from the per-kind map, as in
          exports published before the correction

    Args:
        cell: Raw cell value
        accumulate: 'sum' or 'legacy' (default: from config)

    Raises:
        UnrecognizedField: If any non-empty token is unknown
    """
    mode = accumulate or get_extra_points_accumulation()
    if mode not in (ACCUMULATE_SUM, ACCUMULATE_LEGACY):
        raise ValueError(f'Invalid accumulation mode: {mode}')

    total = 0
    items: Dict[ExtraPointKind, float] = {}

    for token in (cell or '').split(EXTRA_POINTS_DELIMITER):
        token = token.strip()
        if not token:
            continue

        kind, points = resolve_extra_point_token(token)
        total += points

        if mode == ACCUMULATE_SUM:
            items[kind] = items.get(kind, 0) + points
        elif not items.get(kind):
            items[kind] = points

    return ExtraPoints(total=total, items=items)


def parse_start_order(cell: str) -> Optional[int]:
    """
    Decode a "Start order" cell.

    Blank cells mean the order was not recorded. Malformed values degrade to
    0, which validate_game() later reports as out of range.
    """
    value = (cell or '').strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f'Malformed start order "{value}", using 0')
        return 0


def parse_score(cell: str) -> float:
    """Decode a "Score" cell. Blank or malformed values degrade to 0."""
    value = (cell or '').strip()
    if not value:
        return 0.0
    try:
        return float(value)
    except ValueError:
        logger.warning(f'Malformed score "{value}", using 0')
        return 0.0


def parse_date(value: str) -> date:
    """
    Parse a game date using the configured formats, in order.

    Raises:
        MalformedField: If no format matches
    """
    text = (value or '').strip()
    for fmt in get_date_formats():
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise MalformedField(f'Invalid date "{text}"')
