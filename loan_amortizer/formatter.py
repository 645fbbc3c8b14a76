"""Output helpers for the loan amortizer.

This module provides simple functions to render amortization schedules and
summaries in a tabular text format using built‑in printing and string
formatting.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Optional

from .data_models import AmortizationRow
from .summary import EmiBreakdown, ScheduleSummary


def print_summary(summary: ScheduleSummary, breakdown: Optional[Dict[str, Decimal]] = None) -> None:
    """Print a summary of loan metrics in a human‑readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Principal          : {summary.principal:.2f}")
    print(f"Total interest     : {summary.total_interest:.2f}")
    if summary.total_extra:
        print(f"Extra payments     : {summary.total_extra:.2f}")
    print(f"Total paid         : {summary.total_paid:.2f}")
    print(f"Loan duration      : {summary.duration_months} months")
    if summary.last_payment_date:
        print(f"Last payment date  : {summary.last_payment_date.isoformat()}")
    if breakdown and summary.total_paid:
        print(
            f"Principal/interest : {breakdown['principal_percent']:.2f}% / "
            f"{breakdown['interest_percent']:.2f}%"
        )
    if summary.duration_months and not summary.paid_off:
        print("Status             : not paid off")
    print("-" * 72)


def print_schedule(schedule: Iterable[AmortizationRow]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = [
        "Month",
        "Date",
        "Rate%",
        "Opening",
        "Installment",
        "Extra",
        "Total",
        "Interest",
        "Principal",
        "Closing",
    ]
    print("\t".join(headers))
    for row in schedule:
        print(
            "\t".join(
                [
                    str(row.month),
                    row.payment_date.isoformat(),
                    f"{row.annual_rate:.2f}",
                    f"{row.opening_balance:.2f}",
                    f"{row.installment_paid:.2f}",
                    f"{row.extra_paid:.2f}",
                    f"{row.total_paid:.2f}",
                    f"{row.interest_paid:.2f}",
                    f"{row.principal_paid:.2f}",
                    f"{row.closing_balance:.2f}",
                ]
            )
        )


def print_emi(result: EmiBreakdown) -> None:
    print("EMI Breakdown")
    print("=" * 72)
    print(f"Monthly EMI        : {result.monthly_installment:.2f}")
    print(f"Total payment      : {result.total_payment:.2f}")
    print(f"Total interest     : {result.total_interest:.2f}")
    print("=" * 72)
