"""Tabular views of the statistics for the presentation layer."""

from typing import Iterable

import polars as pl

from .aggregation import average_score_series, normalize_matrix, win_rate_series
from .constants import PLACE_NAMES
from .models import PlayerStats, ScoreMismatch

SERIES_BUILDERS = {
    'win_rate': win_rate_series,
    'average_score': average_score_series,
}


def stats_table(stats: dict[str, PlayerStats]) -> pl.DataFrame:
    """One row per player with totals, averages and place counts, best win rate first."""
    rows = [
        {
            'name': s.name,
            'games': s.total_games,
            'wins': s.total_wins,
            'total_score': s.total_score,
            'average_score': s.average_score,
            'win_rate': s.win_rate,
            **s.places.as_dict(),
        }
        for s in stats.values()
    ]
    schema = {
        'name': pl.Utf8,
        'games': pl.Int64,
        'wins': pl.Int64,
        'total_score': pl.Float64,
        'average_score': pl.Float64,
        'win_rate': pl.Float64,
        **{place: pl.Int64 for place in PLACE_NAMES},
    }
    return pl.DataFrame(rows, schema=schema).sort(['win_rate', 'games'], descending=True)


def place_rate_table(stats: dict[str, PlayerStats]) -> pl.DataFrame:
    """Share of each finishing place per player."""
    rows = [{'name': s.name, **s.place_rates} for s in stats.values()]
    schema = {'name': pl.Utf8, **{place: pl.Float64 for place in PLACE_NAMES}}
    return pl.DataFrame(rows, schema=schema)


def start_order_table(matrix: dict[int, dict[str, int]]) -> pl.DataFrame:
    """Place percentages per starting position ("victory percentage by start order")."""
    normalized = normalize_matrix(matrix)
    rows = [{'start_order': order, **row} for order, row in normalized.items()]
    schema = {'start_order': pl.Int64, **{place: pl.Float64 for place in PLACE_NAMES}}
    return pl.DataFrame(rows, schema=schema)


def series_table(stats: dict[str, PlayerStats], kind: str = 'win_rate') -> pl.DataFrame:
    """
    Long-format time series for every player.

    Args:
        stats: Player statistics
        kind: 'win_rate' or 'average_score'

    Returns:
        DataFrame with columns name, step, game_no, value
    """
    if kind not in SERIES_BUILDERS:
        raise ValueError(f'Unknown series kind: {kind}')

    builder = SERIES_BUILDERS[kind]
    rows = [
        {'name': s.name, 'step': step, 'game_no': game_no, 'value': value}
        for s in stats.values()
        for step, (game_no, value) in enumerate(builder(s), 1)
    ]
    schema = {'name': pl.Utf8, 'step': pl.Int64, 'game_no': pl.Utf8, 'value': pl.Float64}
    return pl.DataFrame(rows, schema=schema)


def mismatch_table(mismatches: Iterable[ScoreMismatch]) -> pl.DataFrame:
    """Score mismatches with the difference between recorded and expected score."""
    rows = [
        {
            'game_no': m.game_no,
            'player': m.player,
            'recorded_score': m.recorded_score,
            'expected_score': m.expected_score,
        }
        for m in mismatches
    ]
    schema = {
        'game_no': pl.Utf8,
        'player': pl.Utf8,
        'recorded_score': pl.Float64,
        'expected_score': pl.Float64,
    }
    return pl.DataFrame(rows, schema=schema).with_columns(
        (pl.col('recorded_score') - pl.col('expected_score')).alias('difference')
    )
