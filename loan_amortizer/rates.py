"""Interest rate lookup.

A loan's rate is given as a timeline of ``InterestRate`` entries. For any
payment date the rate in effect is the most recent entry that started on or
before that date.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, List

from .data_models import InterestRate
from .errors import ConfigurationError

MONTHS_PER_YEAR = Decimal(12)


def usable_rates(schedule: Iterable[InterestRate]) -> List[InterestRate]:
    """Drop entries without a date or with a negative rate and sort the rest."""
    valid = [
        entry
        for entry in schedule
        if isinstance(entry.effective_date, date)
        and entry.annual_rate is not None
        and entry.annual_rate >= 0
    ]
    return sorted(valid, key=lambda entry: entry.effective_date)


def resolve_annual_rate(current: date, schedule: Iterable[InterestRate]) -> Decimal:
    """Return the annual rate in percent that applies on ``current``.

    If ``current`` precedes every entry, the earliest entry's rate is used.
    """
    ordered = usable_rates(schedule)
    if not ordered:
        raise ConfigurationError("No valid interest rate entries")
    for entry in reversed(ordered):
        if entry.effective_date <= current:
            return entry.annual_rate
    return ordered[0].annual_rate


def monthly_rate(annual_rate: Decimal) -> Decimal:
    """Convert an annual rate in percent to a monthly decimal rate."""
    return (annual_rate / Decimal(100)) / MONTHS_PER_YEAR


def resolve_rate(current: date, schedule: Iterable[InterestRate]) -> Decimal:
    """Return the monthly rate in effect on ``current``."""
    return monthly_rate(resolve_annual_rate(current, schedule))
