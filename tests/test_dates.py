from datetime import date

import pytest

from utils.dates import (
    add_months,
    last_of_month,
    month_bounds,
    parse_iso_date,
    week_end,
    week_start,
)
from utils.formatters import format_currency
from utils.parsing import parse_amount, parse_id, reply_text, split_pipe_args


class TestDates:
    def test_parse_plain_and_timestamped(self):
        assert parse_iso_date("2024-03-15") == date(2024, 3, 15)
        assert parse_iso_date("2024-03-15T00:00:00.000Z") == date(2024, 3, 15)
        assert parse_iso_date(" 2024-03-15 ") == date(2024, 3, 15)
        assert parse_iso_date(date(2024, 3, 15)) == date(2024, 3, 15)

    @pytest.mark.parametrize("value", [
        "", None, "15/03/2024", "2024-02-30", 20240315, "2024-03-151", "2024-03-15garbage",
    ])
    def test_parse_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_iso_date(value)

    def test_month_arithmetic_clamps(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)
        assert last_of_month(date(2024, 4, 2)) == date(2024, 4, 30)
        assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_weeks_start_on_sunday(self):
        assert week_start(date(2024, 3, 1)) == date(2024, 2, 25)
        assert week_start(date(2024, 3, 3)) == date(2024, 3, 3)
        assert week_end(date(2024, 3, 31)) == date(2024, 4, 6)


class TestFormattingAndParsing:
    def test_currency(self):
        assert format_currency(1250) == "$1,250.00"
        assert format_currency(-1250.5) == "-$1,250.50"
        assert format_currency(10, "EUR") == "€10.00"
        assert format_currency(10, "CHF") == "10.00 CHF"

    def test_split_pipe_args(self):
        assert split_pipe_args(["Visa", "Card", "|", "debt", "|", "500"]) == ["Visa Card", "debt", "500"]
        assert split_pipe_args([]) == []
        assert split_pipe_args(None) == []

    def test_amounts_and_ids(self):
        assert parse_amount("$1,250.50") == 1250.5
        assert parse_id("#7") == 7
        assert parse_amount("-50") == -50.0
        assert parse_amount("-$1,000") == -1000.0
        assert parse_amount("1e3") == 1000.0
        with pytest.raises(ValueError):
            parse_amount("lots")
        with pytest.raises(ValueError):
            parse_amount("12abc")
        with pytest.raises(ValueError):
            parse_amount("inf")
        with pytest.raises(ValueError):
            parse_id("seven")

    def test_reply_text(self):
        assert reply_text({"success": True, "message": "done"}) == "done"
        assert reply_text({"success": False, "error": "nope"}) == "⚠️ nope"
