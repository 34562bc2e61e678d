"""Unit tests for assembling games from export rows."""

from datetime import date, datetime

import openpyxl
import pytest

from catanstats.constants import ExtraPointKind
from catanstats.exceptions import (
    DuplicateRecord,
    OrderingViolation,
    ParseError,
    UnrecognizedField,
)
from catanstats.models import Base, Development
from catanstats.sheet_parser import (
    GameAssembler,
    assemble_games,
    dump_games,
    load_games_json,
    parse_csv_file,
    parse_csv_text,
    parse_rows,
    parse_workbook,
)
from catanstats.validators import validate_game


class TestGameAssembly:
    """Tests for the row-to-record assembler."""

    def test_one_game_per_game_number(self, games):
        """Test the number of games equals the number of distinct game numbers."""
        assert [g.game_no for g in games] == ['1', '2']

    def test_players_keep_column_order(self, games):
        """Test players stay in finishing (column) order."""
        assert games[0].player_names == ('Anna', 'Ben', 'Cleo')
        assert games[1].player_names == ('Ben', 'Cleo', 'Anna')
        assert games[1].winner.name == 'Ben'

    def test_fields_attached_positionally(self, games):
        """Test attribute rows land on the player in the same column."""
        anna = games[0].players[0]
        assert anna.score == 13
        assert anna.base == Base(cities=4, settlements=3)
        assert anna.development == Development(trade=3, politics=1, science=2)
        assert anna.extra_points.items == {ExtraPointKind.ROADS: 2}
        assert anna.order == 2

        cleo = games[0].players[2]
        assert cleo.extra_points.total == 0
        assert cleo.order == 1

    def test_date_parsed(self, games):
        assert games[0].date == '2023-01-05'
        assert games[0].played_on == date(2023, 1, 5)

    def test_header_rows_skipped(self, export_grid):
        """Test the first two rows are skipped even if they look like data."""
        grid = [['9', '2022-12-01', 'Player', 'X', 'Y', '', '']] * 2 + export_grid[2:]
        games = parse_rows(grid)
        assert [g.game_no for g in games] == ['1', '2']

    def test_fewer_than_four_players(self):
        """Test a short "Player" row yields fewer participants."""
        rows = [
            ['7', '2023-03-01', 'Player', ' Anna ', 'Ben', '', ''],
            ['', '', 'Score', '10', '8', '', ''],
        ]
        games = assemble_games(rows)
        assert games[0].player_names == ('Anna', 'Ben')
        assert [p.score for p in games[0].players] == [10, 8]

    def test_older_records_without_details(self):
        """Test games with only players and scores are valid."""
        rows = [
            ['1', '2019-05-04', 'Player', 'Anna', 'Ben', 'Cleo', 'Dan'],
            ['', '', 'Score', '10', '9', '8', '5'],
        ]
        game = assemble_games(rows)[0]
        assert all(p.base is None and p.order is None for p in game.players)
        assert game.players[3].missing_fields == ('base', 'development', 'extraPoints', 'order')

    def test_blank_rows_ignored(self, export_grid):
        """Test spacer rows between blocks are skipped."""
        grid = export_grid[:8] + [[''] * 7] + export_grid[8:]
        assert len(parse_rows(grid)) == 2

    def test_short_rows_padded(self):
        """Test rows without trailing empty cells still map onto all players."""
        rows = [
            ['1', '2023-01-01', 'Player', 'Anna', 'Ben'],
            ['', '', 'Score', '10'],
        ]
        game = assemble_games(rows)[0]
        assert [p.score for p in game.players] == [10, 0]

    def test_unreadable_date_kept(self):
        """Test a bad date does not fail the parse."""
        rows = [['1', 'last tuesday', 'Player', 'Anna', '', '', '']]
        game = assemble_games(rows)[0]
        assert game.date == 'last tuesday'
        assert game.played_on is None

    def test_player_row_resets_players(self):
        """Test a repeated "Player" row re-initializes the player list."""
        rows = [
            ['1', '2023-01-01', 'Player', 'Anna', 'Ben', '', ''],
            ['', '', 'Score', '10', '8', '', ''],
            ['', '', 'Player', 'Cleo', 'Dan', '', ''],
        ]
        game = assemble_games(rows)[0]
        assert game.player_names == ('Cleo', 'Dan')
        assert all(p.score == 0 for p in game.players)

    def test_assembler_feed_and_finish(self):
        """Test the assembler used incrementally."""
        assembler = GameAssembler()
        assembler.feed(['1', '2023-01-01', 'Player', 'Anna', 'Ben', '', ''])
        assembler.feed(['2', '2023-01-02', 'Player', 'Ben', 'Anna', '', ''])
        games = assembler.finish()
        assert [g.winner.name for g in games] == ['Anna', 'Ben']


class TestParseErrors:
    """Tests for fatal parse conditions."""

    def test_attribute_before_player_row(self):
        """Test a score row ahead of the player row is an ordering violation."""
        rows = [
            ['1', '2023-01-01', 'Score', '10', '8', '', ''],
            ['', '', 'Player', 'Anna', 'Ben', '', ''],
        ]
        with pytest.raises(OrderingViolation):
            assemble_games(rows)

    def test_row_before_any_game(self):
        """Test rows before the first game number are rejected."""
        rows = [['', '', 'Player', 'Anna', 'Ben', '', '']]
        with pytest.raises(OrderingViolation):
            assemble_games(rows)

    def test_unknown_field_name(self):
        rows = [
            ['1', '2023-01-01', 'Player', 'Anna', 'Ben', '', ''],
            ['', '', 'Knights', '3', '2', '', ''],
        ]
        with pytest.raises(UnrecognizedField, match='Knights'):
            assemble_games(rows)

    def test_bad_extra_points_token_aborts_parse(self, export_grid):
        """Test no partial results are returned on a bad token."""
        export_grid[12][3] = 'vb, harbor'
        with pytest.raises(UnrecognizedField, match='harbor'):
            parse_rows(export_grid)

    def test_bad_start_order_degrades_to_zero(self):
        """Test a malformed start order keeps the game, with order 0 flagged by validation."""
        rows = [
            ['1', '2023-01-05', 'Player', 'Anna', 'Ben', '', ''],
            ['', '', 'Score', '5', '3', '', ''],
            ['', '', 'Start order', '1', 'x', '', ''],
        ]
        (game,) = assemble_games(rows)

        assert [p.order for p in game.players] == [1, 0]
        assert game.players[1].score == 3.0
        assert 'outside 1-2' in validate_game(game)[0]

    def test_duplicate_game_number(self, export_grid):
        export_grid[8][0] = '1'
        with pytest.raises(DuplicateRecord):
            parse_rows(export_grid)

    def test_duplicate_player_name(self):
        rows = [['1', '2023-01-01', 'Player', 'Anna', 'Anna', '', '']]
        with pytest.raises(DuplicateRecord, match='Anna'):
            assemble_games(rows)

    def test_errors_are_parse_errors(self):
        """Test callers can catch every parse failure with one class."""
        assert issubclass(UnrecognizedField, ParseError)
        assert issubclass(OrderingViolation, ParseError)
        assert issubclass(ParseError, ValueError)


class TestSources:
    """Tests for CSV, workbook and JSON sources."""

    def test_csv_text(self, export_csv, games):
        assert parse_csv_text(export_csv) == games

    def test_csv_file(self, tmp_path, export_csv, games):
        path = tmp_path / 'export.csv'
        path.write_text(export_csv, encoding='utf-8')
        assert parse_csv_file(path) == games

    def test_csv_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_csv_file(tmp_path / 'missing.csv')

    def test_workbook(self, tmp_path, export_grid, games):
        """Test an .xlsx export with numeric and date cells."""
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = 'Games'
        for row in export_grid:
            converted = []
            for value in row:
                if value.isdigit():
                    converted.append(int(value))
                elif value == '2023-01-05':
                    converted.append(datetime(2023, 1, 5))
                else:
                    converted.append(value or None)
            ws.append(converted)
        path = tmp_path / 'export.xlsx'
        wb.save(path)

        parsed = parse_workbook(path, sheet_name='Games')
        assert parsed == games

    def test_json_dump_and_load(self, tmp_path, games):
        """Test parsed games survive a JSON dump."""
        path = tmp_path / 'out' / 'games.json'
        dump_games(path, games)
        assert load_games_json(path) == games
