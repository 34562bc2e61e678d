"""Aggregation of filtered games into player statistics and derived series."""

import logging
from datetime import date
from typing import Callable, Optional, Sequence

from .config import get_participation_threshold
from .constants import (
    EXTRA_POINT_TOKENS,
    MAX_PLAYERS,
    PLACE_NAMES,
    RECENCY_ABANDONED,
    RECENCY_BANDS,
    ExtraPointKind,
)
from .filters import available_players
from .models import Game, PlayerProfile, PlayerStats, Places, SessionSummary
from .schemas import ParticipationThreshold

logger = logging.getLogger('catanstats.aggregation')

# Points a single owned item is worth, used to turn extra points back into counts
EXTRA_POINT_UNITS = {kind: points for kind, points in EXTRA_POINT_TOKENS.values()}
EXTRA_POINT_UNITS[ExtraPointKind.DEFENDER] = 1


def place_name(index: int) -> str:
    """Map a 0-based finishing index to 'first'..'fourth'."""
    if not 0 <= index < MAX_PLAYERS:
        raise ValueError(f'No place name for finishing index {index} (max {MAX_PLAYERS} players)')
    return PLACE_NAMES[index]


def build_player_stats(games: Sequence[Game]) -> dict[str, PlayerStats]:
    """
    Fold games into per-player statistics.

    Each player at finishing index i gets one game, their score, a win if
    i == 0 and one count for place_name(i). Players appear in the result in
    order of first appearance.

    Args:
        games: Filtered games in chronological order

    Returns:
        Dict mapping player name to PlayerStats

    Raises:
        ValueError: If a game has more than four players
    """
    totals: dict[str, dict] = {}

    for game in games:
        for index, player in enumerate(game.players):
            place = place_name(index)
            entry = totals.setdefault(
                player.name,
                {'score': 0.0, 'wins': 0, 'places': dict.fromkeys(PLACE_NAMES, 0), 'games': []},
            )
            entry['score'] += player.score
            entry['wins'] += 1 if index == 0 else 0
            entry['places'][place] += 1
            entry['games'].append(game)

    return {
        name: PlayerStats(
            name=name,
            total_games=len(entry['games']),
            total_score=entry['score'],
            total_wins=entry['wins'],
            places=Places(**entry['places']),
            games=tuple(entry['games']),
        )
        for name, entry in totals.items()
    }


def _running_mean(
    games: Sequence[Game], value: Callable[[Game], float]
) -> list[tuple[str, float]]:
    series = []
    running_total = 0.0
    for count, game in enumerate(games, 1):
        running_total += value(game)
        series.append((game.game_no, running_total / count))
    return series


def win_rate_series(stats: PlayerStats) -> list[tuple[str, float]]:
    """
    Cumulative first-place rate over the player's games.

    Returns:
        List of (game_no, rate) where rate at point i is wins in games 1..i divided by i
    """
    return _running_mean(stats.games, lambda game: 1.0 if game.place_of(stats.name) == 1 else 0.0)


def average_score_series(stats: PlayerStats) -> list[tuple[str, float]]:
    """Cumulative average score over the player's games, as (game_no, average) points."""

    def score(game: Game) -> float:
        player = game.player(stats.name)
        return player.score if player else 0.0

    return _running_mean(stats.games, score)


def start_order_matrix(games: Sequence[Game]) -> dict[int, dict[str, int]]:
    """
    Count finishing places by starting position.

    Only games whose first player carries a start order are counted.

    Returns:
        Dict mapping 1-based start position to {place_name: count}, sorted by position
    """
    matrix: dict[int, dict[str, int]] = {}

    for game in games:
        if not game.players or game.players[0].order is None:
            continue
        for index, player in enumerate(game.players):
            if player.order is None:
                continue
            row = matrix.setdefault(player.order, {})
            place = place_name(index)
            row[place] = row.get(place, 0) + 1

    return {order: matrix[order] for order in sorted(matrix)}


def normalize_matrix(matrix: dict[int, dict[str, int]]) -> dict[int, dict[str, float]]:
    """Divide each cell by its row total, giving place percentages per start position."""
    normalized = {}
    for order, row in matrix.items():
        row_total = sum(row.values())
        normalized[order] = {
            place: (row.get(place, 0) / row_total if row_total else 0.0) for place in PLACE_NAMES
        }
    return normalized


def default_whitelist(
    stats: dict[str, PlayerStats],
    total_games: int,
    threshold: Optional[ParticipationThreshold] = None,
) -> list[str]:
    """
    Players selected when no explicit player filter is set.

    Args:
        stats: Player statistics over the unfiltered games
        total_games: Number of games in the export
        threshold: Participation threshold (default: from config). In 'count'
            mode a player needs at least `minimum` games; in 'fraction' mode
            at least `fraction` of all games.

    Returns:
        Selected player names, in the order of `stats`
    """
    threshold = threshold or get_participation_threshold()

    if threshold.mode == 'fraction':
        minimum = total_games * threshold.fraction
    else:
        minimum = threshold.minimum

    selected = [name for name, s in stats.items() if s.total_games >= minimum]
    logger.debug(f'Default selection ({threshold.mode}, min {minimum:g} games): {selected}')
    return selected


def build_player_profile(stats: PlayerStats) -> PlayerProfile:
    """
    Average a player's point details per game.

    Only games carrying base and development details are used. Extras are
    returned as ownership rates (owned items per game), so defender is the
    average number of defender cards.
    """
    detailed = [
        game
        for game in stats.games
        if game.players and game.players[0].base and game.players[0].development
    ]
    count = len(detailed)

    development = dict.fromkeys(('trade', 'politics', 'science'), 0.0)
    buildings = dict.fromkeys(('cities', 'settlements'), 0.0)
    extras = dict.fromkeys(ExtraPointKind, 0.0)
    start_orders = [0] * MAX_PLAYERS

    for game in detailed:
        player = game.player(stats.name)
        if player.development:
            for key in development:
                development[key] += getattr(player.development, key)
        if player.base:
            for key in buildings:
                buildings[key] += getattr(player.base, key)
        if player.extra_points:
            for kind in extras:
                extras[kind] += player.extra_points.get(kind) / EXTRA_POINT_UNITS[kind]
        if player.order is not None and 1 <= player.order <= MAX_PLAYERS:
            start_orders[player.order - 1] += 1

    if count:
        development = {key: value / count for key, value in development.items()}
        buildings = {key: value / count for key, value in buildings.items()}
        extras = {kind: value / count for kind, value in extras.items()}

    return PlayerProfile(
        name=stats.name,
        detailed_games=count,
        development=development,
        buildings=buildings,
        extras=extras,
        start_orders=tuple(start_orders),
    )


def recency_band(days: int) -> str:
    """Label how long ago the last game was played."""
    for max_days, label in RECENCY_BANDS:
        if days < max_days:
            return label
    return RECENCY_ABANDONED


def summarize_games(games: Sequence[Game], today: Optional[date] = None) -> SessionSummary:
    """
    Headline numbers for the whole export: game and player counts and recency.

    Args:
        games: All parsed games, in file order
        today: Reference date for recency (default: today)
    """
    if not games:
        return SessionSummary(total_games=0, total_players=0)

    first_date = games[0].played_on
    last_date = games[-1].played_on
    days_since = None
    recency = None
    if last_date is not None:
        days_since = ((today or date.today()) - last_date).days
        recency = recency_band(days_since)

    return SessionSummary(
        total_games=len(games),
        total_players=len(available_players(games)),
        first_date=first_date,
        last_date=last_date,
        days_since_last_game=days_since,
        recency=recency,
    )
