"""Shared fixtures: a small two-game export with three players."""

import csv
import io

import pytest

from catanstats.config import clear_config_cache
from catanstats.sheet_parser import parse_rows

HEADER_ROWS = [
    ['Catan: Cities & Knights', '', '', '', '', '', ''],
    ['Game', 'Date', 'Field', '1st', '2nd', '3rd', '4th'],
]

GAME_1 = [
    ['1', '2023-01-05', 'Player', 'Anna', 'Ben', 'Cleo', ''],
    ['', '', 'Score', '13', '10', '7', ''],
    ['', '', 'Base', '4c3s', '3c2s', '2c3s', ''],
    ['', '', 'Development', '3y1b2g', '2y2b', '1g', ''],
    ['', '', 'Extra points', 'roads', 'my', '', ''],
    ['', '', 'Start order', '2', '3', '1', ''],
]

GAME_2 = [
    ['2', '2023-01-12', 'Player', 'Ben', 'Cleo', 'Anna', ''],
    ['', '', 'Score', '13', '9', '6', ''],
    ['', '', 'Base', '5c1s', '3c2s', '2c2s', ''],
    ['', '', 'Development', '4y', '3b1g', '2y', ''],
    ['', '', 'Extra points', 'vb, 1d', 'merchant', '', ''],
    ['', '', 'Start order', '1', '2', '3', ''],
]


@pytest.fixture(autouse=True)
def fresh_config():
    """Make sure every test reads the shipped config file."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def export_grid():
    """Full export grid including the two header rows."""
    return [list(row) for row in HEADER_ROWS + GAME_1 + GAME_2]


@pytest.fixture
def export_csv(export_grid):
    """The export grid rendered as CSV text."""
    buffer = io.StringIO()
    csv.writer(buffer).writerows(export_grid)
    return buffer.getvalue()


@pytest.fixture
def games(export_grid):
    """Parsed games of the sample export."""
    return parse_rows(export_grid)
