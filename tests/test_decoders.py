"""Unit tests for the field decoders."""

import logging
from datetime import date

import pytest

from catanstats.constants import ExtraPointKind
from catanstats.decoders import (
    parse_base,
    parse_date,
    parse_development,
    parse_extra_points,
    parse_score,
    parse_start_order,
)
from catanstats.exceptions import MalformedField, UnrecognizedField
from catanstats.models import Base, Development


class TestBaseDecoder:
    """Tests for "Base" cells (cities and settlements)."""

    def test_cities_and_settlements(self):
        """Test both markers present."""
        assert parse_base('4c2s') == Base(cities=4, settlements=2)

    def test_missing_cities_marker(self):
        """Test a missing marker counts as zero, not an error."""
        assert parse_base('2s') == Base(cities=0, settlements=2)

    def test_empty_cell(self):
        """Test an empty cell decodes to no buildings."""
        assert parse_base('') == Base(cities=0, settlements=0)

    def test_marker_order_independent(self):
        """Test settlements may be written before cities."""
        assert parse_base('1s3c') == Base(cities=3, settlements=1)

    def test_multi_digit_counts(self):
        """Test digit groups longer than one digit."""
        assert parse_base('12s') == Base(cities=0, settlements=12)

    def test_points(self):
        """Test cities count double."""
        assert parse_base('4c2s').points == 10


class TestDevelopmentDecoder:
    """Tests for "Development" cells (trade, politics, science)."""

    def test_all_tracks(self):
        """Test the example from the sheet legend."""
        assert parse_development('3y1b2g') == Development(trade=3, politics=1, science=2)

    def test_partial(self):
        """Test missing tracks default to zero."""
        assert parse_development('2g') == Development(trade=0, politics=0, science=2)

    def test_empty(self):
        """Test an empty cell."""
        assert parse_development('') == Development()


class TestExtraPointsDecoder:
    """Tests for "Extra points" cells."""

    def test_roads_and_metropolis(self):
        """Test roads (2) plus trade metropolis (2)."""
        extra = parse_extra_points('roads, my')
        assert extra.total == 4
        assert extra.items == {
            ExtraPointKind.ROADS: 2,
            ExtraPointKind.METROPOLIS_TRADE: 2,
        }

    def test_all_single_tokens(self):
        """Test every fixed token resolves to its kind and value."""
        extra = parse_extra_points('merchant, mb, mg, vb, vg')
        assert extra.total == 1 + 2 + 2 + 1 + 1
        assert extra.get(ExtraPointKind.MERCHANT) == 1
        assert extra.get(ExtraPointKind.METROPOLIS_POLITICS) == 2
        assert extra.get(ExtraPointKind.METROPOLIS_SCIENCE) == 2
        assert extra.get(ExtraPointKind.VICTORY_POLITICS) == 1
        assert extra.get(ExtraPointKind.VICTORY_SCIENCE) == 1

    def test_defender_digit(self):
        """Test "<digit>d" encodes defender points."""
        extra = parse_extra_points('3d')
        assert extra.total == 3
        assert extra.items == {ExtraPointKind.DEFENDER: 3}

    def test_multi_digit_defender_rejected(self):
        """Test "12d" is refused rather than read as a single digit."""
        with pytest.raises(UnrecognizedField, match='12d'):
            parse_extra_points('12d')

    def test_empty_cell(self):
        """Test an empty cell has no extra points."""
        extra = parse_extra_points('')
        assert extra.total == 0
        assert extra.items == {}

    def test_unrecognized_token(self):
        """Test unknown tokens are refused rather than guessed."""
        with pytest.raises(UnrecognizedField, match='bogus'):
            parse_extra_points('bogus')

    def test_unrecognized_token_among_valid(self):
        """Test one bad token fails the whole cell."""
        with pytest.raises(UnrecognizedField):
            parse_extra_points('roads, longest')

    def test_repeated_kind_sums(self):
        """Test repeated kinds add up in 'sum' mode."""
        extra = parse_extra_points('1d, 2d', accumulate='sum')
        assert extra.total == 3
        assert extra.items == {ExtraPointKind.DEFENDER: 3}

    def test_repeated_kind_legacy(self):
        """Test 'legacy' mode keeps the first value of a repeated kind but still totals all."""
        extra = parse_extra_points('1d, 2d', accumulate='legacy')
        assert extra.total == 3
        assert extra.items == {ExtraPointKind.DEFENDER: 1}

    def test_default_mode_from_config(self):
        """Test the shipped config sums repeated kinds."""
        extra = parse_extra_points('roads, roads')
        assert extra.items == {ExtraPointKind.ROADS: 4}

    def test_invalid_mode(self):
        """Test an unknown accumulation mode is rejected."""
        with pytest.raises(ValueError):
            parse_extra_points('roads', accumulate='max')


class TestScalarDecoders:
    """Tests for start order, score and date cells."""

    def test_start_order(self):
        assert parse_start_order('3') == 3

    def test_start_order_blank(self):
        """Test a blank start order means not recorded."""
        assert parse_start_order('') is None

    def test_start_order_malformed_degrades_to_zero(self, caplog):
        """Test a non-integer start order becomes 0 with a warning."""
        with caplog.at_level(logging.WARNING, logger='catanstats'):
            assert parse_start_order('first') == 0
        assert 'Malformed start order "first"' in caplog.text

    def test_score(self):
        assert parse_score('11') == 11.0

    def test_score_malformed_degrades_to_zero(self):
        """Test malformed scores become 0 instead of failing."""
        assert parse_score('n/a') == 0.0
        assert parse_score('') == 0.0

    def test_date_formats(self):
        """Test ISO and US formats from the shipped config."""
        assert parse_date('2023-01-05') == date(2023, 1, 5)
        assert parse_date('01/05/2023') == date(2023, 1, 5)
        assert parse_date('05.01.2023') == date(2023, 1, 5)

    def test_date_malformed(self):
        with pytest.raises(MalformedField):
            parse_date('sometime in May')
