"""Aggregates derived from an amortization schedule.

The engine only emits rows. Totals, running sums for charts and the
principal/interest split are folded from those rows here, each in a single
pass over the schedule.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Sequence

from .data_models import AmortizationRow
from .engine import MAX_AMOUNT, MAX_ANNUAL_RATE, MAX_MONTHS, solve_installment
from .errors import ValidationError
from .rates import monthly_rate
from .utils import round_money

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ScheduleSummary:
    principal: Decimal
    total_interest: Decimal
    total_extra: Decimal
    total_paid: Decimal
    duration_months: int
    first_payment_date: Optional[date]
    last_payment_date: Optional[date]
    paid_off: bool


@dataclass(frozen=True)
class CumulativePoint:
    month: int
    payment_date: date
    cumulative_interest: Decimal
    cumulative_principal: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class EmiBreakdown:
    """Result of the standalone flat-rate installment calculator."""

    monthly_installment: Decimal
    total_payment: Decimal
    total_interest: Decimal


def summarize_schedule(schedule: Sequence[AmortizationRow]) -> ScheduleSummary:
    """Fold a schedule into its headline totals."""
    total_interest = ZERO
    total_extra = ZERO
    total_paid = ZERO
    for row in schedule:
        total_interest += row.interest_paid
        total_extra += row.extra_paid
        total_paid += row.total_paid

    if not schedule:
        return ScheduleSummary(
            principal=ZERO,
            total_interest=ZERO,
            total_extra=ZERO,
            total_paid=ZERO,
            duration_months=0,
            first_payment_date=None,
            last_payment_date=None,
            paid_off=False,
        )
    return ScheduleSummary(
        principal=schedule[0].opening_balance,
        total_interest=total_interest,
        total_extra=total_extra,
        total_paid=total_paid,
        duration_months=len(schedule),
        first_payment_date=schedule[0].payment_date,
        last_payment_date=schedule[-1].payment_date,
        paid_off=schedule[-1].closing_balance == 0,
    )


def cumulative_totals(schedule: Sequence[AmortizationRow]) -> Iterator[CumulativePoint]:
    """Yield running interest and principal totals, one point per row."""
    interest = ZERO
    principal = ZERO
    for row in schedule:
        interest += row.interest_paid
        principal += row.principal_paid
        yield CumulativePoint(
            month=row.month,
            payment_date=row.payment_date,
            cumulative_interest=interest,
            cumulative_principal=principal,
            closing_balance=row.closing_balance,
        )


def payment_breakdown(summary: ScheduleSummary) -> Dict[str, Decimal]:
    """Split the total paid into its principal and interest shares.

    Percentages are relative to ``total_paid`` and rounded to
    two places; both are zero for an empty schedule.
    """
    principal_repaid = summary.total_paid - summary.total_interest
    base = summary.total_paid
    if base <= 0:
        return {
            "principal": ZERO,
            "interest": ZERO,
            "principal_percent": ZERO,
            "interest_percent": ZERO,
        }
    return {
        "principal": principal_repaid,
        "interest": summary.total_interest,
        "principal_percent": round_money(principal_repaid / base * HUNDRED),
        "interest_percent": round_money(summary.total_interest / base * HUNDRED),
    }


def emi_breakdown(principal: Decimal, annual_rate: Decimal, tenure_months: int) -> EmiBreakdown:
    """Return the level installment and totals for a flat-rate loan.

    ``annual_rate`` is in percent. The installment is rounded to cents before
    the totals are derived from it, so the totals match what a borrower pays.
    """
    if principal is None or principal <= 0:
        raise ValidationError("Principal must be positive")
    if principal >= MAX_AMOUNT:
        raise ValidationError(f"Principal must be below {MAX_AMOUNT:,.0f}")
    if annual_rate is None or annual_rate < 0:
        raise ValidationError("Interest rate cannot be negative")
    if annual_rate > MAX_ANNUAL_RATE:
        raise ValidationError(f"Interest rate cannot exceed {MAX_ANNUAL_RATE}%")
    if tenure_months is None or tenure_months <= 0:
        raise ValidationError("Tenure must be a positive number of months")
    if tenure_months > MAX_MONTHS:
        raise ValidationError(f"Tenure cannot exceed {MAX_MONTHS} months")
    installment = round_money(solve_installment(principal, monthly_rate(annual_rate), tenure_months))
    total_payment = installment * tenure_months
    return EmiBreakdown(
        monthly_installment=installment,
        total_payment=total_payment,
        total_interest=total_payment - principal,
    )


def schedule_to_dicts(schedule: Sequence[AmortizationRow]) -> List[Dict[str, object]]:
    """Convert rows into JSON-serialisable dictionaries."""
    serialized = []
    for row in schedule:
        serialized.append(
            {
                "month": row.month,
                "date": row.payment_date.isoformat(),
                "annual_rate": float(row.annual_rate),
                "opening_balance": float(row.opening_balance),
                "installment": float(row.installment_paid),
                "extra": float(row.extra_paid),
                "total_paid": float(row.total_paid),
                "interest": float(row.interest_paid),
                "principal": float(row.principal_paid),
                "closing_balance": float(row.closing_balance),
            }
        )
    return serialized


def summary_to_dict(summary: ScheduleSummary) -> Dict[str, object]:
    return {
        "principal": float(summary.principal),
        "total_interest": float(summary.total_interest),
        "total_extra": float(summary.total_extra),
        "total_paid": float(summary.total_paid),
        "duration_months": summary.duration_months,
        "first_payment_date": summary.first_payment_date.isoformat() if summary.first_payment_date else None,
        "last_payment_date": summary.last_payment_date.isoformat() if summary.last_payment_date else None,
        "paid_off": summary.paid_off,
    }
