"""Command‑line interface for the loan amortizer.

This module uses the ``click`` library to implement a multi‑command interface.
Users can compute full amortization schedules, view summaries or work out the
level installment of a flat-rate loan. Results can be printed to the terminal
or exported to JSON/CSV files.

The option parsing helpers here also serve the web front end, which passes
its form fields through ``build_parameters_from_options``.
"""

from __future__ import annotations

import csv
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import click

from .data_models import AmortizationRow, InterestRate, LoanParameters, RepaymentMode
from .engine import MAX_MONTHS, compute_schedule, validate_parameters
from .errors import LoanCalculatorError, ValidationError
from .formatter import print_emi, print_schedule, print_summary
from .summary import (
    emi_breakdown,
    payment_breakdown,
    schedule_to_dicts,
    summarize_schedule,
    summary_to_dict,
)
from .utils import normalize_year_month, parse_amount, parse_date, parse_int, parse_percent

logger = logging.getLogger(__name__)

MAX_PRINTED_ROWS = 120


def parse_rate_strings(values: Iterable[str], start_date) -> List[InterestRate]:
    """Parse ``DATE:PERCENT`` entries; a bare ``PERCENT`` starts at ``start_date``."""
    rates: List[InterestRate] = []
    for item in values:
        if ":" in item:
            when, percent = item.rsplit(":", 1)
            effective = parse_date(when)
        else:
            effective, percent = start_date, item
        rate = parse_percent(percent)
        if rate < 0:
            raise ValidationError(f"Interest rate cannot be negative; got {item}")
        rates.append(InterestRate(effective_date=effective, annual_rate=rate))
    return rates


def parse_extra_strings(values: Iterable[str]) -> Dict[str, Decimal]:
    """Parse ``YYYY-MM:AMOUNT`` entries into a month-keyed mapping.

    A later entry for the same month replaces an earlier one.
    """
    extras: Dict[str, Decimal] = {}
    for item in values:
        parts = item.split(":")
        if len(parts) != 2:
            raise ValidationError(f"Extra payment must be in YYYY-MM:AMOUNT format; got {item}")
        month, amount_str = parts
        amount = parse_amount(amount_str)
        if amount < 0:
            raise ValidationError(f"Extra payment cannot be negative; got {item}")
        extras[normalize_year_month(month)] = amount
    return extras


def build_parameters_from_options(
    principal: str,
    start_date: str,
    installment: Optional[str] = None,
    tenure: Optional[int] = None,
    rate: Iterable[str] = (),
    extra: Iterable[str] = (),
    default_extra: Optional[str] = None,
    extra_interval: Optional[int] = None,
) -> LoanParameters:
    """Build and validate ``LoanParameters`` from raw user strings.

    Exactly one of ``installment`` and ``tenure`` must be given; it selects
    the repayment mode. Raises ``ValidationError`` on any bad input.
    """
    if installment and tenure:
        raise ValidationError("Give either a fixed installment or a tenure, not both")
    if not installment and not tenure:
        raise ValidationError("A fixed installment or a tenure is required")

    start = parse_date(start_date)
    rates = parse_rate_strings(rate, start)
    if installment:
        mode = RepaymentMode.FIXED_INSTALLMENT
        fixed_installment = parse_amount(installment)
    else:
        mode = RepaymentMode.FIXED_TENURE
        fixed_installment = None

    params = LoanParameters(
        principal=parse_amount(principal),
        start_date=start,
        mode=mode,
        interest_rates=rates,
        fixed_installment=fixed_installment,
        tenure_months=parse_int(tenure, "Tenure") if tenure else None,
        default_extra_amount=parse_amount(default_extra) if default_extra else Decimal("0"),
        default_extra_interval_months=parse_int(extra_interval, "Extra interval") if extra_interval not in (None, "") else 1,
        extra_payment_overrides=parse_extra_strings(extra),
    )
    validate_parameters(params)
    return params


def export_to_json(path: Path, schedule: List[AmortizationRow]) -> None:
    """Export schedule and summary to a JSON file."""
    summary = summarize_schedule(schedule)
    data = {"summary": summary_to_dict(summary), "schedule": schedule_to_dicts(schedule)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[AmortizationRow]) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Month",
        "Date",
        "Rate",
        "Opening_Balance",
        "Installment",
        "Extra",
        "Total_Paid",
        "Interest",
        "Principal",
        "Closing_Balance",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in schedule:
            writer.writerow(
                [
                    row.month,
                    row.payment_date.isoformat(),
                    row.annual_rate,
                    row.opening_balance,
                    row.installment_paid,
                    row.extra_paid,
                    row.total_paid,
                    row.interest_paid,
                    row.principal_paid,
                    row.closing_balance,
                ]
            )


def loan_options(func):
    """Attach the options shared by ``schedule`` and ``summary``."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (e.g. 600000 or 600k)"),
        click.option("--start-date", "-s", "start_date", required=True, help="First payment date (YYYY-MM-DD)"),
        click.option("--installment", "-i", "installment", help="Fixed monthly installment"),
        click.option("--tenure", "-t", "tenure", type=click.IntRange(min=1), help="Loan tenure in months"),
        click.option(
            "--rate",
            "-r",
            "rate",
            multiple=True,
            required=True,
            help="Annual rate in percent, as PERCENT or YYYY-MM-DD:PERCENT for a rate change",
        ),
        click.option("--extra", "extra", multiple=True, help="Extra payment in YYYY-MM:AMOUNT format"),
        click.option("--default-extra", "default_extra", help="Extra payment applied when no month override exists"),
        click.option(
            "--extra-interval",
            "extra_interval",
            type=int,
            default=1,
            show_default=True,
            help="Apply the default extra payment every N months",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _run(options: dict) -> List[AmortizationRow]:
    try:
        params = build_parameters_from_options(**options)
        return compute_schedule(params)
    except LoanCalculatorError as exc:
        logger.debug("Rejected loan options: %s", exc)
        raise click.BadParameter(str(exc))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command‑line loan amortization calculator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--output", "-o", "output", type=str, help="Output file path (.json or .csv)")
def schedule(output: Optional[str], **options) -> None:
    """Compute and print the full amortization schedule."""
    path = Path(output) if output else None
    if path and path.suffix.lower() not in (".json", ".csv"):
        raise click.BadParameter("Unsupported output format; use .json or .csv")
    rows = _run(options)
    if len(rows) >= MAX_MONTHS and rows[-1].closing_balance > 0:
        click.echo(
            f"Warning: loan not paid off after {MAX_MONTHS} months; check the installment covers interest.",
            err=True,
        )
    if path:
        if path.suffix.lower() == ".json":
            export_to_json(path, rows)
        else:
            export_to_csv(path, rows)
        click.echo(f"Schedule exported to {path}")
        return

    summary_data = summarize_schedule(rows)
    print_summary(summary_data, payment_breakdown(summary_data))
    # Limit schedule length printed to avoid flooding the terminal
    if len(rows) > MAX_PRINTED_ROWS:
        click.echo(f"Schedule has {len(rows)} rows; showing first {MAX_PRINTED_ROWS} rows.")
        print_schedule(rows[:MAX_PRINTED_ROWS])
    else:
        print_schedule(rows)


@cli.command()
@loan_options
@click.option("--output", "-o", "output", type=str, help="Output file path (.json)")
def summary(output: Optional[str], **options) -> None:
    """Compute and print only the summary metrics for a loan."""
    if output and Path(output).suffix.lower() != ".json":
        raise click.BadParameter("Summary export must use .json extension")
    summary_data = summarize_schedule(_run(options))
    if output:
        path = Path(output)
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_to_dict(summary_data)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data, payment_breakdown(summary_data))


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Loan amount")
@click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")
@click.option("--tenure", "-t", "tenure", required=True, type=int, help="Loan tenure in months")
def emi(principal: str, rate: str, tenure: int) -> None:
    """Compute the level monthly installment for a flat-rate loan."""
    try:
        result = emi_breakdown(parse_amount(principal), parse_percent(rate), tenure)
    except LoanCalculatorError as exc:
        raise click.BadParameter(str(exc))
    print_emi(result)


if __name__ == "__main__":
    cli()
