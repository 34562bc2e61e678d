from .models import (
    Base,
    Development,
    ExtraPoints,
    PlayerResult,
    Game,
    Places,
    PlayerStats,
    ScoreMismatch,
    MissingStats,
    PlayerProfile,
    SessionSummary,
)
from .constants import ExtraPointKind, RowField
from .exceptions import (
    StatsError,
    ParseError,
    UnrecognizedField,
    OrderingViolation,
    DuplicateRecord,
    MalformedField,
    FetchError,
)
from .decoders import (
    parse_base,
    parse_development,
    parse_extra_points,
    parse_start_order,
    parse_score,
    parse_date,
)
from .sheet_parser import (
    GameAssembler,
    assemble_games,
    parse_rows,
    parse_csv_text,
    parse_csv_file,
    parse_workbook,
    dump_games,
    load_games_json,
)
from .validators import (
    expected_score,
    find_score_mismatches,
    find_missing_stats,
    validate_games,
)
from .filters import (
    FilterCriteria,
    filter_by_date,
    filter_by_players,
    filter_by_completeness,
    apply_filters,
    available_players,
)
from .aggregation import (
    build_player_stats,
    win_rate_series,
    average_score_series,
    start_order_matrix,
    normalize_matrix,
    default_whitelist,
    build_player_profile,
    summarize_games,
)
from .data_fetcher import ExportFetcher, fetch_text, load_games

__all__ = [
    # Models
    'Base',
    'Development',
    'ExtraPoints',
    'PlayerResult',
    'Game',
    'Places',
    'PlayerStats',
    'ScoreMismatch',
    'MissingStats',
    'PlayerProfile',
    'SessionSummary',
    'ExtraPointKind',
    'RowField',
    # Errors
    'StatsError',
    'ParseError',
    'UnrecognizedField',
    'OrderingViolation',
    'DuplicateRecord',
    'MalformedField',
    'FetchError',
    # Field decoders
    'parse_base',
    'parse_development',
    'parse_extra_points',
    'parse_start_order',
    'parse_score',
    'parse_date',
    # Parsing
    'GameAssembler',
    'assemble_games',
    'parse_rows',
    'parse_csv_text',
    'parse_csv_file',
    'parse_workbook',
    'dump_games',
    'load_games_json',
    # Consistency checks
    'expected_score',
    'find_score_mismatches',
    'find_missing_stats',
    'validate_games',
    # Filters
    'FilterCriteria',
    'filter_by_date',
    'filter_by_players',
    'filter_by_completeness',
    'apply_filters',
    'available_players',
    # Aggregation
    'build_player_stats',
    'win_rate_series',
    'average_score_series',
    'start_order_matrix',
    'normalize_matrix',
    'default_whitelist',
    'build_player_profile',
    'summarize_games',
    # Fetching
    'ExportFetcher',
    'fetch_text',
    'load_games',
]
