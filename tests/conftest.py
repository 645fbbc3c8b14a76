"""Shared loan fixtures.

Fixed installment: 600,000 at 10 % from 2025-08-01, paying 8,350 a month.
Fixed tenure: 100,000 at 12 % over 12 months from 2025-01-15.
"""

from datetime import date
from decimal import Decimal

import pytest

from loan_amortizer.data_models import InterestRate, LoanParameters, RepaymentMode


@pytest.fixture
def flat_ten_percent():
    return [InterestRate(effective_date=date(2025, 8, 1), annual_rate=Decimal("10"))]


@pytest.fixture
def installment_params(flat_ten_percent) -> LoanParameters:
    return LoanParameters(
        principal=Decimal("600000"),
        start_date=date(2025, 8, 1),
        mode=RepaymentMode.FIXED_INSTALLMENT,
        interest_rates=flat_ten_percent,
        fixed_installment=Decimal("8350"),
    )


@pytest.fixture
def tenure_params() -> LoanParameters:
    return LoanParameters(
        principal=Decimal("100000"),
        start_date=date(2025, 1, 15),
        mode=RepaymentMode.FIXED_TENURE,
        interest_rates=[InterestRate(effective_date=date(2025, 1, 1), annual_rate=Decimal("12"))],
        tenure_months=12,
    )
