"""Utility functions for the loan amortizer.

This module provides helpers for parsing user input into Python data types,
for calendar arithmetic (adding months with day clamping, year-month keys)
and for rounding monetary values to currency precision.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
import calendar
from typing import Union

from .errors import ValidationError

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

CENT = Decimal("0.01")
NOISE_THRESHOLD = Decimal("1e-9")


def parse_year_month(ym: str) -> date:
    """Parse a YYYY-MM string into a ``date`` object (first day of month).

    Parameters
    ----------
    ym: str
        A string in the form ``"YYYY-MM"``. The day component, if present,
        will be ignored.

    Returns
    -------
    date
        A date object representing the first day of the specified month.

    Raises
    ------
    ValidationError
        If the string is not a valid year-month.
    """
    try:
        parts = ym.strip().split("-")
        if len(parts) < 2:
            raise ValueError
        return date(int(parts[0]), int(parts[1]), 1)
    except (AttributeError, ValueError) as exc:
        raise ValidationError(f"Invalid year-month string: {ym}") from exc


def parse_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM`` (first of the month) into a date."""
    text = value.strip() if isinstance(value, str) else ""
    if text.count("-") == 1:
        return parse_year_month(text)
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid date string: {value}") from exc


def year_month_key(dt: date) -> str:
    """Return the ``"YYYY-MM"`` key used to look up extra payment overrides."""
    return dt.strftime("%Y-%m")


def normalize_year_month(ym: str) -> str:
    """Validate a year-month string and return it in canonical form."""
    return year_month_key(parse_year_month(ym))


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def round_money(value: Decimal) -> Decimal:
    """Round to cents, mapping float noise and negative zero to ``0.00``."""
    if value.copy_abs() < NOISE_THRESHOLD:
        return Decimal("0.00")
    rounded = value.quantize(CENT, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        return Decimal("0.00")
    return rounded


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValidationError`` if conversion fails.
    """
    try:
        cleaned = str(value).strip().replace(",", "")
        result = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValidationError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000") and shorthand with ``k``/``m`` suffixes
    (e.g., "500k" meaning 500_000).
    """
    text = str(value).strip().lower().replace(",", "")
    factor = Decimal("1")
    if text.endswith("k"):
        factor = Decimal("1000")
        text = text[:-1]
    elif text.endswith("m"):
        factor = Decimal("1000000")
        text = text[:-1]
    return decimal_from_str(text) * factor


def parse_percent(value: str) -> Decimal:
    """Parse an annual rate in percent; a trailing ``%`` is allowed."""
    text = str(value).strip()
    if text.endswith("%"):
        text = text[:-1]
    return decimal_from_str(text)


def parse_int(value: Union[str, int], label: str) -> int:
    """Parse a whole number of months, raising ``ValidationError`` on junk."""
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"{label} must be a whole number; got {value}") from exc
