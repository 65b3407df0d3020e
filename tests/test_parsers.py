"""Unit tests for Jobber CSV field parsers."""

import pytest

from jobber_reconcile.sources.parsers import (
    clean_string,
    parse_currency,
    parse_date,
    parse_id_list,
    parse_integer,
)


class TestParseDate:
    """Tests for parse_date."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Jan 15, 2024", "2024-01-15"),
            ("Dec 3, 2023", "2023-12-03"),
            ("2024-01-15", "2024-01-15"),
            ("2024-01-15T10:30:00Z", "2024-01-15"),
            ("1/15/2024", "2024-01-15"),
            ("12/03/2023", "2023-12-03"),
            ("January 15, 2024", "2024-01-15"),
            ("15 Jan 2024", "2024-01-15"),
        ],
    )
    def test_supported_formats(self, value: str, expected: str) -> None:
        assert parse_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "-", " - "])
    def test_blank_is_none(self, value) -> None:
        assert parse_date(value) is None

    def test_garbage_is_none(self) -> None:
        assert parse_date("not a date") is None

    def test_invalid_calendar_date_is_none(self) -> None:
        """Feb 30 does not roll over into March."""
        assert parse_date("2024-02-30") is None
        assert parse_date("Feb 30, 2024") is None

    def test_surrounding_whitespace_ignored(self) -> None:
        assert parse_date("  Jan 15, 2024 ") == "2024-01-15"


class TestParseCurrency:
    """Tests for parse_currency."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("$1,234.50", 1234.5),
            ("500", 500.0),
            ("12.5%", 12.5),
            ("-$40.00", -40.0),
            ("0", 0.0),
        ],
    )
    def test_parses_money(self, value: str, expected: float) -> None:
        assert parse_currency(value) == expected

    @pytest.mark.parametrize("value", [None, "", "-", "abc"])
    def test_unparseable_is_zero(self, value) -> None:
        assert parse_currency(value) == 0.0

    def test_trailing_text_ignored(self) -> None:
        assert parse_currency("250.00 CAD") == 250.0


class TestParseInteger:
    """Tests for parse_integer."""

    def test_parses_identifier(self) -> None:
        assert parse_integer("1042") == 1042

    def test_strips_thousands_separator(self) -> None:
        assert parse_integer("1,042") == 1042

    @pytest.mark.parametrize("value", [None, "", " ", "-", "n/a"])
    def test_missing_is_none_not_zero(self, value) -> None:
        assert parse_integer(value) is None

    def test_leading_digits_only(self) -> None:
        assert parse_integer("77abc") == 77


class TestParseIdList:
    """Tests for parse_id_list."""

    def test_splits_and_trims(self) -> None:
        assert parse_id_list("101, 102 ,103") == ["101", "102", "103"]

    def test_drops_non_numeric_tokens(self) -> None:
        assert parse_id_list("101, -, abc, , 7") == ["101", "7"]

    def test_preserves_order_and_duplicates(self) -> None:
        assert parse_id_list("5,3,5") == ["5", "3", "5"]

    @pytest.mark.parametrize("value", [None, "", "-"])
    def test_blank_is_empty(self, value) -> None:
        assert parse_id_list(value) == []


class TestCleanString:
    """Tests for clean_string."""

    def test_trims(self) -> None:
        assert clean_string("  Jane  ") == "Jane"

    @pytest.mark.parametrize("value", [None, "", "  ", "-"])
    def test_blank_is_none(self, value) -> None:
        assert clean_string(value) is None
