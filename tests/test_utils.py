from datetime import date
from decimal import Decimal

import pytest

from loan_amortizer.errors import ValidationError
from loan_amortizer.utils import (
    add_months,
    decimal_from_str,
    normalize_year_month,
    parse_amount,
    parse_date,
    parse_int,
    parse_percent,
    parse_year_month,
    round_money,
    year_month_key,
)


class TestAddMonths:
    def test_same_day_next_month(self):
        assert add_months(date(2025, 8, 1), 1) == date(2025, 9, 1)

    def test_clamps_to_month_end(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert add_months(date(2025, 3, 31), 1) == date(2025, 4, 30)

    def test_leap_year(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_year_rollover(self):
        assert add_months(date(2025, 12, 15), 1) == date(2026, 1, 15)
        assert add_months(date(2025, 8, 1), 1199) == date(2125, 7, 1)


class TestRoundMoney:
    def test_rounds_half_up(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")

    def test_noise_becomes_zero(self):
        assert str(round_money(Decimal("1e-12"))) == "0.00"
        assert str(round_money(Decimal("-1e-12"))) == "0.00"

    def test_negative_zero_is_normalized(self):
        assert str(round_money(Decimal("-0.004"))) == "0.00"


class TestParsing:
    def test_year_month(self):
        assert parse_year_month("2025-09") == date(2025, 9, 1)
        assert normalize_year_month(" 2025-9 ") == "2025-09"
        assert year_month_key(date(2025, 9, 30)) == "2025-09"

    @pytest.mark.parametrize("value", ["2025", "2025-13", "abc-de", ""])
    def test_bad_year_month(self, value):
        with pytest.raises(ValidationError):
            parse_year_month(value)

    def test_date(self):
        assert parse_date("2025-08-01") == date(2025, 8, 1)
        assert parse_date("2025-08") == date(2025, 8, 1)

    def test_bad_date(self):
        with pytest.raises(ValidationError):
            parse_date("2025-02-30")

    def test_amounts(self):
        assert parse_amount("600k") == Decimal("600000")
        assert parse_amount("1.5m") == Decimal("1500000")
        assert parse_amount("1,200.50") == Decimal("1200.50")

    @pytest.mark.parametrize("value", ["", "abc", "nan", "12x"])
    def test_bad_amounts(self, value):
        with pytest.raises(ValidationError):
            parse_amount(value)

    def test_percent(self):
        assert parse_percent("10.5%") == Decimal("10.5")
        assert decimal_from_str(" 7 ") == Decimal("7")

    def test_int(self):
        assert parse_int("12", "Tenure") == 12
        assert parse_int(12, "Tenure") == 12
        with pytest.raises(ValidationError, match="Tenure"):
            parse_int("twelve", "Tenure")
