"""Reconstruct game records from the rows of a spreadsheet export.

Each game is written as a block of rows sharing the same players:

    gameNo | date       | Player      | Anna  | Ben   | Cleo  | Dan
           |            | Score       | 12    | 11    | 8     | 7
           |            | Base        | 4c2s  | 3c3s  | 3c1s  | 2c3s
           |            | Development | 3y1b  | 2g    | 1y1b  | 1g
           |            | Extra points| roads | my    | 1d    |
           |            | Start order | 2     | 4     | 1     | 3

The game number appears only on the first row of a block. Player columns
are in finishing order, so the first player is the winner.
"""

import csv
import io
import logging
import zipfile
from dataclasses import asdict, dataclass, replace
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from .config import get_header_rows, get_player_slots
from .constants import (
    DATE_COLUMN,
    FIELD_COLUMN,
    FIRST_PLAYER_COLUMN,
    GAME_NO_COLUMN,
    ExtraPointKind,
    RowField,
)
from .decoders import (
    parse_base,
    parse_date,
    parse_development,
    parse_extra_points,
    parse_score,
    parse_start_order,
)
from .exceptions import (
    DuplicateRecord,
    MalformedField,
    OrderingViolation,
    ParseError,
    UnrecognizedField,
)
from .models import Base, Development, ExtraPoints, Game, PlayerResult
from .schemas import (
    BaseRecord,
    DevelopmentRecord,
    ExtraPointsRecord,
    GameRecord,
    GamesFile,
    PlayerRecord,
)
from .utils import load_json, save_json

logger = logging.getLogger('catanstats.sheet_parser')


@dataclass
class _GameDraft:
    """Game block being assembled. `players` stays None until its "Player" row."""
    game_no: str
    date: str
    players: Optional[list[PlayerResult]] = None


class GameAssembler:
    """
    Finite-state assembler turning raw rows into Game records.

    State is the game block currently being read. A row with a game number
    closes the current block and opens a new one; every row is then
    dispatched on its field name. Attribute rows are mapped positionally
    onto the players established by the block's "Player" row.

    Example:
        assembler = GameAssembler()
        for row in rows:
            assembler.feed(row)
        games = assembler.finish()
    """

    def __init__(self, player_slots: Optional[int] = None, accumulate: Optional[str] = None):
        self.player_slots = player_slots or get_player_slots()
        self.accumulate = accumulate
        self._current: Optional[_GameDraft] = None
        self._games: list[Game] = []
        self._seen_game_numbers: set[str] = set()

        # One handler per attribute row; "Player" is handled separately
        self._attribute_handlers: dict[RowField, Callable[[PlayerResult, str], PlayerResult]] = {
            RowField.SCORE: lambda p, v: replace(p, score=parse_score(v)),
            RowField.BASE: lambda p, v: replace(p, base=parse_base(v)),
            RowField.DEVELOPMENT: lambda p, v: replace(p, development=parse_development(v)),
            RowField.EXTRA_POINTS: lambda p, v: replace(
                p, extra_points=parse_extra_points(v, self.accumulate)
            ),
            RowField.START_ORDER: lambda p, v: replace(p, order=parse_start_order(v)),
        }

    def feed(self, row: Sequence[str]) -> None:
        """Consume one data row (header rows must already be stripped)."""
        cells = [(cell or '').strip() for cell in row]
        if not any(cells):
            return

        width = FIRST_PLAYER_COLUMN + self.player_slots
        cells = (cells + [''] * width)[:width]

        game_no = cells[GAME_NO_COLUMN]
        if game_no:
            self._start_game(game_no, cells[DATE_COLUMN])

        field_name = cells[FIELD_COLUMN]
        try:
            row_field = RowField(field_name)
        except ValueError:
            raise UnrecognizedField(field_name, ', '.join(cells)) from None

        if self._current is None:
            raise OrderingViolation(f'"{field_name}" row appears before any game number')

        values = cells[FIRST_PLAYER_COLUMN:]
        if row_field is RowField.PLAYER:
            self._set_players(values)
        else:
            self._apply_attribute(row_field, values)

    def finish(self) -> list[Game]:
        """Emit the in-progress game and return all games in file order."""
        self._emit_current()
        games = self._games
        self._games = []
        return games

    def _start_game(self, game_no: str, game_date: str) -> None:
        self._emit_current()
        if game_no in self._seen_game_numbers:
            raise DuplicateRecord(f'Game #{game_no} appears more than once')
        self._seen_game_numbers.add(game_no)
        self._current = _GameDraft(game_no=game_no, date=game_date)

    def _set_players(self, values: list[str]) -> None:
        names = [value for value in values if value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise DuplicateRecord(
                f'Game #{self._current.game_no} lists {", ".join(duplicates)} more than once'
            )
        self._current.players = [PlayerResult(name=name) for name in names]

    def _apply_attribute(self, row_field: RowField, values: list[str]) -> None:
        if self._current.players is None:
            raise OrderingViolation(
                f'"{row_field.value}" row of game #{self._current.game_no} '
                f'appears before its "Player" row'
            )
        handler = self._attribute_handlers[row_field]
        self._current.players = [
            handler(player, values[index]) for index, player in enumerate(self._current.players)
        ]

    def _emit_current(self) -> None:
        draft = self._current
        if draft is None:
            return
        self._current = None

        try:
            played_on = parse_date(draft.date)
        except MalformedField:
            logger.warning(f'Game #{draft.game_no} has an unreadable date "{draft.date}"')
            played_on = None

        self._games.append(
            Game(
                game_no=draft.game_no,
                date=draft.date,
                players=tuple(draft.players or ()),
                played_on=played_on,
            )
        )


def assemble_games(rows: Iterable[Sequence[str]], accumulate: Optional[str] = None) -> list[Game]:
    """
    Build games from data rows (without the header block).

    Args:
        rows: Data rows laid out as [gameNo, date, field, player1..player4]
        accumulate: Extra points accumulation mode (default: from config)

    Returns:
        Games in file order, which is chronological order

    Raises:
        ParseError: On any unrecognized field, ordering violation or duplicate;
            no partial results are returned
    """
    assembler = GameAssembler(accumulate=accumulate)
    for row in rows:
        assembler.feed(row)
    return assembler.finish()


def parse_rows(
    grid: Sequence[Sequence[str]],
    header_rows: Optional[int] = None,
    accumulate: Optional[str] = None,
) -> list[Game]:
    """Build games from a full export grid, skipping its header rows unconditionally."""
    skip = get_header_rows() if header_rows is None else header_rows
    games = assemble_games(grid[skip:], accumulate=accumulate)
    logger.info(f'Parsed {len(games)} games')
    return games


def parse_csv_text(text: str, accumulate: Optional[str] = None) -> list[Game]:
    """Parse a CSV export held in memory."""
    grid = list(csv.reader(io.StringIO(text)))
    return parse_rows(grid, accumulate=accumulate)


def parse_csv_file(path: str | Path, accumulate: Optional[str] = None) -> list[Game]:
    """Parse a CSV export from disk."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Export file not found: {path}')

    with open(path, encoding='utf-8-sig', newline='') as f:
        return parse_csv_text(f.read(), accumulate=accumulate)


def _cell_to_text(value) -> str:
    """Render an openpyxl cell value the way a CSV export would."""
    if value is None:
        return ''
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_workbook(
    filepath: str | Path,
    sheet_name: Optional[str] = None,
    accumulate: Optional[str] = None,
) -> list[Game]:
    """
    Parse games from an Excel export.

    Args:
        filepath: Path to the .xlsx file
        sheet_name: Sheet to read (default: the active sheet)
        accumulate: Extra points accumulation mode (default: from config)

    Returns:
        Games in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ParseError: If the file is not a readable workbook or has no such sheet
    """
    try:
        wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException) as e:
        raise ParseError(f'{filepath} is not a readable Excel workbook: {e}') from e

    try:
        if sheet_name and sheet_name not in wb.sheetnames:
            raise ParseError(
                f'Worksheet "{sheet_name}" not found in {filepath} '
                f'(available: {", ".join(wb.sheetnames)})'
            )
        ws = wb[sheet_name] if sheet_name else wb.active
        grid = [[_cell_to_text(value) for value in row] for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    return parse_rows(grid, accumulate=accumulate)


def game_to_record(game: Game) -> GameRecord:
    """Convert a Game into its JSON dump schema."""
    players = []
    for player in game.players:
        players.append(
            PlayerRecord(
                name=player.name,
                score=player.score,
                base=BaseRecord(**asdict(player.base)) if player.base else None,
                development=(
                    DevelopmentRecord(**asdict(player.development)) if player.development else None
                ),
                extraPoints=(
                    ExtraPointsRecord(
                        total=player.extra_points.total,
                        items={kind.value: pts for kind, pts in player.extra_points.items.items()},
                    )
                    if player.extra_points
                    else None
                ),
                order=player.order,
            )
        )
    return GameRecord(gameNo=game.game_no, date=game.date, players=players)


def record_to_game(record: GameRecord) -> Game:
    """Convert a validated JSON record back into a Game."""
    players = []
    for player in record.players:
        players.append(
            PlayerResult(
                name=player.name,
                score=player.score,
                base=Base(**player.base.model_dump()) if player.base else None,
                development=(
                    Development(**player.development.model_dump()) if player.development else None
                ),
                extra_points=(
                    ExtraPoints(
                        total=player.extraPoints.total,
                        items={ExtraPointKind(k): v for k, v in player.extraPoints.items.items()},
                    )
                    if player.extraPoints
                    else None
                ),
                order=player.order,
            )
        )

    try:
        played_on = parse_date(record.date)
    except MalformedField:
        played_on = None

    return Game(game_no=record.gameNo, date=record.date, players=tuple(players), played_on=played_on)


def dump_games(path: str | Path, games: Sequence[Game]) -> None:
    """Write parsed games to a JSON file."""
    save_json(path, GamesFile(games=[game_to_record(game) for game in games]))
    logger.info(f'Saved {len(games)} games to {path}')


def load_games_json(path: str | Path) -> list[Game]:
    """Load games previously written by dump_games()."""
    games_file = load_json(path, schema=GamesFile)
    games = [record_to_game(record) for record in games_file.games]

    seen = set()
    for game in games:
        if game.game_no in seen:
            raise DuplicateRecord(f'Game #{game.game_no} appears more than once')
        seen.add(game.game_no)

    return games
