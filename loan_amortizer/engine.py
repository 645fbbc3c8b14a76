"""Core calculation engine for the loan amortizer.

This module implements the month-by-month amortization loop for loans repaid
either with a fixed installment or over a fixed tenure. It supports interest
rates that change over time and extra principal payments, either explicit
per-month overrides or a default amount applied every N months. Results are
returned as a list of ``AmortizationRow`` objects; aggregates are left to
``loan_amortizer.summary``.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from .data_models import AmortizationRow, LoanParameters, RepaymentMode
from .errors import ConfigurationError, ValidationError
from .rates import monthly_rate, resolve_annual_rate, usable_rates
from .utils import add_months, round_money, year_month_key

logger = logging.getLogger(__name__)

MAX_MONTHS = 1200  # 100 years
MAX_AMOUNT = Decimal("1e20")
MAX_ANNUAL_RATE = Decimal("1000")  # percent
ZERO = Decimal("0")


def solve_installment(principal: Decimal, rate_per_month: Decimal, months_remaining: int) -> Decimal:
    """Return the level monthly payment that clears ``principal``.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``. The result is not rounded.
    """
    if months_remaining < 1:
        raise ConfigurationError("Months remaining must be at least 1")
    if rate_per_month == 0:
        return principal / Decimal(months_remaining)
    factor = (1 + rate_per_month) ** months_remaining
    return principal * (rate_per_month * factor) / (factor - 1)


def validate_parameters(params: LoanParameters) -> None:
    """Reject out-of-range inputs before the engine is invoked.

    Amounts, rates and tenure are bounded so the Decimal arithmetic of a
    validated run cannot overflow or lose cent precision.
    """
    if params.principal is None or params.principal <= 0:
        raise ValidationError("Principal must be positive")
    if params.principal >= MAX_AMOUNT:
        raise ValidationError(f"Principal must be below {MAX_AMOUNT:,.0f}")
    if params.mode == RepaymentMode.FIXED_INSTALLMENT:
        if params.fixed_installment is None:
            raise ValidationError("Fixed installment is required in fixed installment mode")
        if params.fixed_installment <= 0:
            raise ValidationError("Fixed installment must be positive")
        if params.fixed_installment >= MAX_AMOUNT:
            raise ValidationError(f"Fixed installment must be below {MAX_AMOUNT:,.0f}")
    elif params.mode == RepaymentMode.FIXED_TENURE:
        if params.tenure_months is None:
            raise ValidationError("Tenure is required in fixed tenure mode")
        if params.tenure_months <= 0:
            raise ValidationError("Tenure must be a positive number of months")
        if params.tenure_months > MAX_MONTHS:
            raise ValidationError(f"Tenure cannot exceed {MAX_MONTHS} months")
    else:
        raise ValidationError(f"Unknown repayment mode: {params.mode}")
    if params.default_extra_amount < 0:
        raise ValidationError("Default extra payment cannot be negative")
    if params.default_extra_amount >= MAX_AMOUNT:
        raise ValidationError(f"Default extra payment must be below {MAX_AMOUNT:,.0f}")
    if params.default_extra_interval_months < 1:
        raise ValidationError("Extra payment interval must be at least 1 month")
    if not params.interest_rates:
        raise ValidationError("At least one interest rate entry is required")
    for entry in params.interest_rates:
        if entry.annual_rate is not None and entry.annual_rate > MAX_ANNUAL_RATE:
            raise ValidationError(f"Interest rate cannot exceed {MAX_ANNUAL_RATE}%")
    for month_key, amount in params.extra_payment_overrides.items():
        if amount < 0:
            raise ValidationError(f"Extra payment for {month_key} cannot be negative")
        if amount >= MAX_AMOUNT:
            raise ValidationError(f"Extra payment for {month_key} must be below {MAX_AMOUNT:,.0f}")


def requested_extra(params: LoanParameters, month_key: str, month_index: int) -> Decimal:
    """Return the extra payment asked for in a month, before capping.

    An explicit override wins, including an override of zero. Otherwise the
    default amount applies on every ``default_extra_interval_months``-th month.
    """
    if month_key in params.extra_payment_overrides:
        return params.extra_payment_overrides[month_key]
    if month_index % params.default_extra_interval_months == 0:
        return params.default_extra_amount
    return ZERO


def _check_mode_inputs(params: LoanParameters) -> None:
    if params.mode == RepaymentMode.FIXED_INSTALLMENT and params.fixed_installment is None:
        raise ConfigurationError("Fixed installment mode requires fixed_installment")
    if params.mode == RepaymentMode.FIXED_TENURE and params.tenure_months is None:
        raise ConfigurationError("Fixed tenure mode requires tenure_months")
    if not usable_rates(params.interest_rates):
        raise ConfigurationError("No valid interest rate entries")


def compute_schedule(params: LoanParameters) -> List[AmortizationRow]:
    """Compute the amortization schedule for a loan.

    Parameters
    ----------
    params: LoanParameters
        The validated loan parameters (see ``validate_parameters``).

    Returns
    -------
    List[AmortizationRow]
        One row per month, ending with the first month whose closing balance
        is zero. If the loan is not paid off within ``MAX_MONTHS`` months the
        partial schedule is returned.
    """
    _check_mode_inputs(params)
    fixed_installment_mode = params.mode == RepaymentMode.FIXED_INSTALLMENT

    schedule: List[AmortizationRow] = []
    outstanding = round_money(params.principal)
    current_date = params.start_date
    month_index = 1

    while month_index <= MAX_MONTHS:
        annual_rate = resolve_annual_rate(current_date, params.interest_rates)
        rate_per_month = monthly_rate(annual_rate)

        if fixed_installment_mode:
            installment = params.fixed_installment
        else:
            # The installment floats: re-solved from the current balance each month
            months_left = max(params.tenure_months - (month_index - 1), 1)
            installment = solve_installment(outstanding, rate_per_month, months_left)

        interest = outstanding * rate_per_month
        principal_from_installment = max(installment - interest, ZERO)

        wanted_extra = requested_extra(params, year_month_key(current_date), month_index)
        max_extra = max(outstanding - principal_from_installment, ZERO)
        extra = min(wanted_extra, max_extra)

        # Final month: installment principal plus extra covers the balance, pay exactly what is left
        if fixed_installment_mode and wanted_extra >= max_extra:
            principal_from_installment = max(outstanding - extra, ZERO)
            installment_paid = interest + principal_from_installment
            principal_paid = outstanding
        else:
            installment_paid = installment
            principal_paid = min(round_money(principal_from_installment + extra), outstanding)

        installment_paid = round_money(installment_paid)
        extra_paid = round_money(extra)
        closing_balance = round_money(max(outstanding - principal_paid, ZERO))

        schedule.append(
            AmortizationRow(
                month=month_index,
                payment_date=current_date,
                annual_rate=round_money(annual_rate),
                opening_balance=outstanding,
                installment_paid=installment_paid,
                extra_paid=extra_paid,
                total_paid=installment_paid + extra_paid,
                interest_paid=round_money(interest),
                principal_paid=round_money(principal_paid),
                closing_balance=closing_balance,
            )
        )

        if closing_balance == 0:
            break
        outstanding = closing_balance
        current_date = add_months(current_date, 1)
        month_index += 1

    if schedule and schedule[-1].closing_balance > 0:
        logger.warning(
            "Loan not paid off after %d months; remaining balance %s",
            len(schedule),
            schedule[-1].closing_balance,
        )
    logger.debug("Computed %d rows in %s mode", len(schedule), params.mode.value)
    return schedule
