"""Consistency checks for parsed games.

All checks are advisory: they report problems for data-quality review but
never block ingestion.
"""

import logging
from typing import Iterable, Optional

from .constants import MAX_PLAYERS
from .models import Game, MissingStats, PlayerResult, ScoreMismatch

logger = logging.getLogger('catanstats.validators')


def expected_score(player: PlayerResult) -> Optional[float]:
    """
    Compute the score implied by a player's point details.

    Scoring:
        - Cities: 2 points each
        - Settlements: 1 point each
        - Extra points: their decoded total

    Returns:
        The implied score, or None if the player has neither base nor
        extra points recorded
    """
    if player.base is None and player.extra_points is None:
        return None

    base_points = player.base.points if player.base else 0
    extra_points = player.extra_points.total if player.extra_points else 0
    return base_points + extra_points


def check_player_score(game_no: str, player: PlayerResult) -> Optional[ScoreMismatch]:
    """Return a ScoreMismatch if the recorded score disagrees with the point details."""
    expected = expected_score(player)
    if expected is None or expected == player.score:
        return None
    return ScoreMismatch(
        game_no=game_no,
        player=player.name,
        recorded_score=player.score,
        expected_score=expected,
    )


def find_score_mismatches(games: Iterable[Game]) -> list[ScoreMismatch]:
    """
    Cross-check every player's recorded score against their point details.

    Args:
        games: Parsed games

    Returns:
        One ScoreMismatch per disagreeing player, in game order
    """
    mismatches = []
    for game in games:
        for player in game.players:
            mismatch = check_player_score(game.game_no, player)
            if mismatch:
                mismatches.append(mismatch)
    return mismatches


def find_missing_stats(games: Iterable[Game]) -> list[MissingStats]:
    """
    List games missing optional field categories.

    All players of a block are written in the same import batch, so the
    first player's record stands in for the whole game.
    """
    reports = []
    for game in games:
        if not game.players:
            continue
        missing = game.players[0].missing_fields
        if missing:
            reports.append(MissingStats(game_no=game.game_no, missing_fields=missing))
    return reports


def validate_game(game: Game) -> list[str]:
    """
    Check a game's structure.

    Checks:
    - At least one and at most four players
    - Start orders, when recorded, are distinct and within 1..N

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    count = len(game.players)

    if count == 0:
        errors.append(f'Game #{game.game_no} has no players')
    elif count > MAX_PLAYERS:
        errors.append(f'Game #{game.game_no} has {count} players (max {MAX_PLAYERS})')

    orders = [p.order for p in game.players if p.order is not None]
    out_of_range = [order for order in orders if not 1 <= order <= count]
    if out_of_range:
        errors.append(
            f'Game #{game.game_no} has start orders outside 1-{count}: '
            f'{", ".join(str(o) for o in out_of_range)}'
        )
    if len(orders) != len(set(orders)):
        errors.append(f'Game #{game.game_no} has duplicate start orders')

    return errors


def validate_games(games: Iterable[Game]) -> tuple[list[str], list[str]]:
    """
    Validate all parsed games and log the findings.

    Returns:
        Tuple of (errors, warnings)
        - errors: Structural problems that make placement statistics unreliable
        - warnings: Score mismatches and games missing detail, for review
    """
    games = list(games)
    errors: list[str] = []
    warnings: list[str] = []

    for game in games:
        errors.extend(validate_game(game))

    for mismatch in find_score_mismatches(games):
        warnings.append(
            f'Game #{mismatch.game_no}: {mismatch.player} recorded {mismatch.recorded_score:g} '
            f'pts but details add up to {mismatch.expected_score:g}'
        )

    for report in find_missing_stats(games):
        warnings.append(
            f'Game #{report.game_no} is missing {", ".join(report.missing_fields)} data'
        )

    for error in errors:
        logger.error(error)
    for warning in warnings:
        logger.warning(warning)

    return errors, warnings
