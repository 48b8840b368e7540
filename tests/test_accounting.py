from datetime import datetime
from decimal import Decimal

from notprofi.accounting import (
    format_invoice_number,
    format_job_number,
    format_money,
    money_str,
    month_bounds,
    month_label,
    to_decimal,
)


def test_to_decimal_treats_missing_and_garbage_as_zero():
    assert to_decimal(None) == Decimal("0")
    assert to_decimal("") == Decimal("0")
    assert to_decimal("abc") == Decimal("0")
    assert to_decimal("NaN") == Decimal("0")
    assert to_decimal("1e30") == Decimal("0")


def test_to_decimal_rounds_to_cents():
    assert to_decimal("20.5") == Decimal("20.50")
    assert to_decimal(" 30 ") == Decimal("30.00")
    assert to_decimal(Decimal("1.005")) == Decimal("1.01")


def test_money_formatting():
    assert money_str("50.5") == "50.50"
    assert format_money(Decimal("12")) == "€ 12.00"
    assert format_money(None) == "€ 0.00"


def test_month_bounds_cover_one_calendar_month():
    assert month_bounds("2024-01") == (datetime(2024, 1, 1), datetime(2024, 2, 1))
    assert month_bounds("2024-12") == (datetime(2024, 12, 1), datetime(2025, 1, 1))


def test_month_bounds_reject_malformed_tokens():
    for token in ("", "2024-1", "2024/01", "2024-13", "2024-00", "January", "2024-01-05", None,
                  "0000-01", "9999-12", "2024-01\n", "\u0662\u0660\u0662\u0664-\u0660\u0661"):
        assert month_bounds(token) is None


def test_month_label_matches_bounds():
    assert month_label(datetime(2024, 1, 31, 23, 59)) == "2024-01"


def test_invoice_number_format():
    assert format_invoice_number("2024-01", 1) == "RE-202401-0001"
    assert format_invoice_number("2024-11", 12345) == "RE-202411-12345"


def test_job_number_uses_last_six_digits():
    assert format_job_number(1700000123456) == "NP24-123456"
    assert format_job_number(1700000123456, prefix="X") == "X-123456"
