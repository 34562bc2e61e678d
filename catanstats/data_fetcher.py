"""Retrieval of raw exports from URLs or local files."""

import logging
from pathlib import Path
from typing import Optional

import requests

from .config import get_fetch_timeout
from .exceptions import FetchError, StatsError
from .models import Game
from .sheet_parser import load_games_json, parse_csv_file, parse_csv_text, parse_workbook

logger = logging.getLogger('catanstats.data_fetcher')


def is_url(source: str) -> bool:
    return source.startswith(('http://', 'https://'))


def fetch_text(url: str, timeout: Optional[float] = None) -> str:
    """
    Download an export as text.

    Raises:
        FetchError: On a missing URL, network failure, HTTP error or a
            response that is not text
    """
    if not url:
        raise FetchError('Missing file')

    try:
        response = requests.get(url, timeout=timeout or get_fetch_timeout(), allow_redirects=True)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f'Could not fetch {url}: {e}') from e

    content_type = response.headers.get('Content-Type', '')
    if content_type and not content_type.startswith(('text/', 'application/csv')):
        raise FetchError(f'Expected a text export from {url}, got {content_type}')

    return response.text


def load_games(source: str | Path, sheet_name: Optional[str] = None) -> list[Game]:
    """
    Load games from a URL, an .xlsx workbook, a JSON dump or a CSV file.

    Args:
        source: URL or path
        sheet_name: Worksheet for .xlsx sources (default: active sheet)

    Returns:
        Games in file order
    """
    source_str = str(source)
    if is_url(source_str):
        return parse_csv_text(fetch_text(source_str))

    suffix = Path(source_str).suffix.lower()
    if suffix in ('.xlsx', '.xlsm'):
        return parse_workbook(source_str, sheet_name=sheet_name)
    if suffix == '.json':
        return load_games_json(source_str)
    return parse_csv_file(source_str)


class ExportFetcher:
    """
    Loads one export and remembers its outcome.

    While a load is outstanding `is_loading` is True. A failed load leaves
    `games` as None and records a user-facing message in `error`, so the
    caller can carry on and try another source.

    Example:
        fetcher = ExportFetcher('https://example.com/export.csv')
        games = fetcher.load()
        if games is None:
            print(fetcher.error)
    """

    def __init__(self, source: str | Path, sheet_name: Optional[str] = None):
        self.source = source
        self.sheet_name = sheet_name
        self.is_loading = False
        self.error: Optional[str] = None
        self._games: Optional[list[Game]] = None

    @property
    def games(self) -> Optional[list[Game]]:
        """Lazy load games on first access."""
        if self._games is None and self.error is None:
            self.load()
        return self._games

    def load(self) -> Optional[list[Game]]:
        """Fetch and parse the source, returning None on failure."""
        self.is_loading = True
        self.error = None
        self._games = None
        try:
            if not str(self.source):
                raise FetchError('Missing file')
            self._games = load_games(self.source, sheet_name=self.sheet_name)
        except (StatsError, OSError, ValueError) as e:
            logger.error(f'Failed to load {self.source}: {e}')
            self.error = str(e)
        finally:
            self.is_loading = False
        return self._games
