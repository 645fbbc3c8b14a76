from decimal import Decimal

import pytest

from loan_amortizer.engine import compute_schedule
from loan_amortizer.errors import ValidationError
from loan_amortizer.summary import (
    cumulative_totals,
    emi_breakdown,
    payment_breakdown,
    schedule_to_dicts,
    summarize_schedule,
    summary_to_dict,
)


class TestSummarizeSchedule:
    def test_tenure_loan(self, tenure_params):
        schedule = compute_schedule(tenure_params)
        summary = summarize_schedule(schedule)
        assert summary.principal == Decimal("100000.00")
        assert summary.duration_months == 12
        assert summary.paid_off
        assert summary.total_extra == 0
        assert summary.total_interest == sum(row.interest_paid for row in schedule)
        # per-row rounding can leave a cent between installment and its parts
        assert abs(summary.total_paid - summary.total_interest - Decimal("100000")) <= Decimal("0.12")
        assert summary.first_payment_date == schedule[0].payment_date
        assert summary.last_payment_date == schedule[-1].payment_date

    def test_empty(self):
        summary = summarize_schedule([])
        assert summary.duration_months == 0
        assert summary.total_paid == 0
        assert summary.first_payment_date is None
        assert not summary.paid_off

    def test_to_dict(self, tenure_params):
        data = summary_to_dict(summarize_schedule(compute_schedule(tenure_params)))
        assert data["duration_months"] == 12
        assert data["first_payment_date"] == "2025-01-15"
        assert data["paid_off"] is True


class TestCumulativeTotals:
    def test_running_sums(self, tenure_params):
        schedule = compute_schedule(tenure_params)
        points = list(cumulative_totals(schedule))
        assert len(points) == len(schedule)
        assert points[0].cumulative_interest == schedule[0].interest_paid
        assert points[1].cumulative_principal == schedule[0].principal_paid + schedule[1].principal_paid
        assert points[-1].cumulative_principal == Decimal("100000.00")
        assert points[-1].cumulative_interest == summarize_schedule(schedule).total_interest
        assert points[-1].closing_balance == 0


class TestPaymentBreakdown:
    def test_shares_add_up(self, installment_params):
        summary = summarize_schedule(compute_schedule(installment_params))
        breakdown = payment_breakdown(summary)
        assert breakdown["interest"] == summary.total_interest
        assert abs(breakdown["principal_percent"] + breakdown["interest_percent"] - 100) <= Decimal("0.01")
        assert breakdown["interest_percent"] > 0

    def test_empty_schedule(self):
        breakdown = payment_breakdown(summarize_schedule([]))
        assert breakdown["principal_percent"] == 0
        assert breakdown["interest_percent"] == 0


class TestEmiBreakdown:
    def test_standard(self):
        result = emi_breakdown(Decimal("100000"), Decimal("12"), 12)
        assert result.monthly_installment == Decimal("8884.88")
        assert result.total_payment == Decimal("106618.56")
        assert result.total_interest == Decimal("6618.56")

    def test_zero_rate(self):
        result = emi_breakdown(Decimal("120000"), Decimal("0"), 12)
        assert result.monthly_installment == Decimal("10000.00")
        assert result.total_interest == 0

    @pytest.mark.parametrize(
        "principal, rate, tenure",
        [
            (Decimal("0"), Decimal("10"), 12),
            (Decimal("1000"), Decimal("-1"), 12),
            (Decimal("1000"), Decimal("10"), 0),
            (Decimal("1e27"), Decimal("10"), 12),
            (Decimal("1000"), Decimal("5000"), 12),
            (Decimal("1000"), Decimal("10"), 10**9),
        ],
    )
    def test_rejects_bad_input(self, principal, rate, tenure):
        with pytest.raises(ValidationError):
            emi_breakdown(principal, rate, tenure)


def test_schedule_to_dicts(installment_params):
    first = schedule_to_dicts(compute_schedule(installment_params))[0]
    assert first == {
        "month": 1,
        "date": "2025-08-01",
        "annual_rate": 10.0,
        "opening_balance": 600000.0,
        "installment": 8350.0,
        "extra": 0.0,
        "total_paid": 8350.0,
        "interest": 5000.0,
        "principal": 3350.0,
        "closing_balance": 596650.0,
    }
