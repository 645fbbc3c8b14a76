"""Data models for the loan amortizer.

This module defines dataclasses representing the entities the engine works
with: interest rate changes, the loan parameters for one calculation and the
rows of the resulting amortization schedule. Rows are frozen because a
schedule is never modified once it has been produced.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional


class RepaymentMode(str, Enum):
    """How the monthly installment is determined.

    ``FIXED_INSTALLMENT`` pays the same amount every month until the balance
    is gone. ``FIXED_TENURE`` re-solves the installment every month so the
    loan ends after ``tenure_months`` payments.
    """

    FIXED_INSTALLMENT = "installment"
    FIXED_TENURE = "tenure"


@dataclass(frozen=True)
class InterestRate:
    """An annual interest rate that applies from ``effective_date`` onwards.

    Attributes
    ----------
    effective_date: date
        First day on which the rate is charged.
    annual_rate: Decimal
        Nominal annual rate in percent (``Decimal("10")`` means 10 %).
    """

    effective_date: date
    annual_rate: Decimal


@dataclass(frozen=True)
class LoanParameters:
    """All inputs for a single amortization run.

    Extra payment overrides are keyed by ``"YYYY-MM"``. An override, even an
    explicit zero, replaces the default extra payment for that month.
    """

    principal: Decimal
    start_date: date
    mode: RepaymentMode
    interest_rates: List[InterestRate]
    fixed_installment: Optional[Decimal] = None
    tenure_months: Optional[int] = None
    default_extra_amount: Decimal = Decimal("0")
    default_extra_interval_months: int = 1
    extra_payment_overrides: Dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class AmortizationRow:
    """One month of the amortization schedule.

    All monetary values are rounded to two decimal places. ``principal_paid``
    includes the extra payment, so ``closing_balance`` equals
    ``opening_balance - principal_paid``.
    """

    month: int
    payment_date: date
    annual_rate: Decimal  # percent, rounded to 2 places
    opening_balance: Decimal
    installment_paid: Decimal
    extra_paid: Decimal
    total_paid: Decimal
    interest_paid: Decimal
    principal_paid: Decimal
    closing_balance: Decimal
