"""Stats configuration management."""

import logging
from functools import lru_cache
from pathlib import Path

from .schemas import ParticipationThreshold, StatsConfig
from .utils import load_json

CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'stats_config.json'

logger = logging.getLogger('catanstats.config')


@lru_cache(maxsize=1)
def get_config() -> StatsConfig:
    """
    Load stats configuration from data/stats_config.json.

    Configuration is cached after first load. A missing file falls back to
    the schema defaults.

    Returns:
        StatsConfig object with validated settings

    Raises:
        ValueError: If the config file has invalid structure

    Example:
        from catanstats.config import get_config
        config = get_config()
        print(f"Accumulation mode: {config.extra_points_accumulation}")
    """
    if not CONFIG_PATH.exists():
        logger.debug(f'No config at {CONFIG_PATH}, using defaults')
        return StatsConfig()
    return load_json(CONFIG_PATH, schema=StatsConfig)


def get_header_rows() -> int:
    """Get the number of header rows to skip in an export."""
    return get_config().header_rows


def get_player_slots() -> int:
    """Get the number of player columns in an export row."""
    return get_config().player_slots


def get_extra_points_accumulation() -> str:
    """Get the per-kind extra points accumulation mode ('sum' or 'legacy')."""
    return get_config().extra_points_accumulation


def get_participation_threshold() -> ParticipationThreshold:
    """Get the default player auto-selection threshold."""
    return get_config().participation_threshold


def get_date_formats() -> list[str]:
    """Get accepted date formats, tried in order."""
    return get_config().date_formats


def get_fetch_timeout() -> float:
    """Get the HTTP timeout in seconds for fetching exports."""
    return get_config().fetch_timeout


def clear_config_cache() -> None:
    """Forget the cached config so the next get_config() re-reads the file."""
    get_config.cache_clear()
