"""Constants and lookup tables for catanstats."""

from enum import Enum


class ExtraPointKind(str, Enum):
    """Bonus-scoring categories that can appear in the "Extra points" row."""

    MERCHANT = 'merchant'
    ROADS = 'roads'
    DEFENDER = 'defender'
    VICTORY_POLITICS = 'victoryPolitics'
    VICTORY_SCIENCE = 'victoryScience'
    METROPOLIS_TRADE = 'metropolisTrade'
    METROPOLIS_POLITICS = 'metropolisPolitics'
    METROPOLIS_SCIENCE = 'metropolisScience'


class RowField(str, Enum):
    """Recognized values of the field-name column."""

    PLAYER = 'Player'
    SCORE = 'Score'
    BASE = 'Base'
    DEVELOPMENT = 'Development'
    EXTRA_POINTS = 'Extra points'
    START_ORDER = 'Start order'


# Extra-points token -> (kind, points)
EXTRA_POINT_TOKENS = {
    'roads': (ExtraPointKind.ROADS, 2),
    'merchant': (ExtraPointKind.MERCHANT, 1),
    'my': (ExtraPointKind.METROPOLIS_TRADE, 2),
    'mb': (ExtraPointKind.METROPOLIS_POLITICS, 2),
    'mg': (ExtraPointKind.METROPOLIS_SCIENCE, 2),
    'vb': (ExtraPointKind.VICTORY_POLITICS, 1),
    'vg': (ExtraPointKind.VICTORY_SCIENCE, 1),
}

# Defender of Catan cards are written as "<n>d", worth one point each
DEFENDER_PATTERN = r'^(\d)d$'

EXTRA_POINTS_DELIMITER = ', '

# Micro-format markers for the "Base" and "Development" rows
BASE_MARKERS = {
    'cities': 'c',
    'settlements': 's',
}

DEVELOPMENT_MARKERS = {
    'trade': 'y',      # yellow
    'politics': 'b',   # blue
    'science': 'g',    # green
}

# Finishing places, index 0 = winner
PLACE_NAMES = ('first', 'second', 'third', 'fourth')
MAX_PLAYERS = len(PLACE_NAMES)

# Column layout of every data row
GAME_NO_COLUMN = 0
DATE_COLUMN = 1
FIELD_COLUMN = 2
FIRST_PLAYER_COLUMN = 3

# Optional per-player field categories, as reported by the missing-stats check
POINT_DETAIL_FIELDS = ('base', 'development', 'extraPoints')
ORDER_FIELD = 'order'

# Completeness requirements accepted by the stats filter
REQUIRE_ORDER = 'order'
REQUIRE_POINT_DETAILS = 'point-details'
COMPLETENESS_REQUIREMENTS = (REQUIRE_ORDER, REQUIRE_POINT_DETAILS)

# Days since the last game -> recency band shown next to the "last played" card
RECENCY_BANDS = [
    (14, 'fresh'),
    (30, 'recent'),
    (60, 'idle'),
    (120, 'stale'),
]
RECENCY_ABANDONED = 'abandoned'
