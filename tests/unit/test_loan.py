"""Unit tests for loan.py — validation, schedule properties, derived metrics."""
from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from loan_amortizer.loan import Loan, LoanError, PeriodOutOfRangeError, ValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")


def _mortgage(**overrides) -> Loan:
    """200 000 at 6% over 30 years, compounded monthly."""
    params = dict(principal=200000, interest=0.06, term=30, term_unit="years", compounded="monthly")
    params.update(overrides)
    return Loan(**params)


def _drift_bound(loan: Loan) -> Decimal:
    """Largest residual balance the per-period cent rounding can produce.

    Each period can be off by at most one cent (half a cent on the payment,
    half a cent on the interest) and that error grows at the period rate.
    """
    r = loan.interest / loan.n_periods
    n = len(loan.schedule)
    if r == ZERO:
        return CENT * n
    return CENT * (((1 + r) ** n - 1) / r)


SAMPLE_LOANS = [
    dict(principal=200000, interest=0.06, term=30),
    dict(principal=25000, interest=0.07, term=5),
    dict(principal=12000, interest=0, term=1),
    dict(principal=350000, interest=0.045, term=20, downpayment=70000),
    dict(principal=10000, interest=0.05, term=1, compounded="daily"),
    dict(principal=80000, interest=0.08, term=15, compounded="annually"),
    dict(principal="1500.50", interest="0.199", term="2"),
]


class TestValidation:
    @pytest.mark.parametrize("overrides,match", [
        (dict(principal=-1), "principal"),
        (dict(principal=0), "principal"),
        (dict(interest=-0.01), "interest"),
        (dict(interest=1.01), "interest"),
        (dict(term=0), "term"),
        (dict(term=-5), "term"),
        (dict(term_unit="weeks"), "term_unit"),
        (dict(compounded="weekly"), "compounded"),
        (dict(term_unit=["years"]), "term_unit"),
        (dict(compounded=["monthly"]), "compounded"),
        (dict(downpayment=-100), "downpayment"),
        (dict(downpayment=200000), "downpayment"),
        (dict(principal="abc"), "principal"),
        (dict(interest=float("nan")), "interest"),
        (dict(term=True), "term"),
    ])
    def test_invalid_parameters(self, overrides, match):
        with pytest.raises(ValidationError, match=match):
            _mortgage(**overrides)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            _mortgage(principal=-1)

    @pytest.mark.parametrize("interest", [0, 1, "0", "1.0"])
    def test_interest_bounds_inclusive(self, interest):
        assert _mortgage(interest=interest).interest == Decimal(str(interest))

    def test_frozen(self):
        loan = _mortgage()
        with pytest.raises(FrozenInstanceError):
            loan.principal = Decimal("1")


class TestConstruction:
    def test_defaults(self):
        loan = Loan(principal=1000, interest=0.05, term=1)
        assert loan.term_unit == "years"
        assert loan.compounded == "monthly"
        assert loan.currency == "$"
        assert loan.downpayment == ZERO

    def test_values_stored_as_decimal(self):
        loan = _mortgage()
        assert isinstance(loan.principal, Decimal)
        assert isinstance(loan.interest, Decimal)
        assert isinstance(loan.term, Decimal)

    @pytest.mark.parametrize("compounded,n_periods", [
        ("daily", 365),
        ("monthly", 12),
        ("annually", 1),
    ])
    def test_n_periods(self, compounded, n_periods):
        assert _mortgage(compounded=compounded, term=1).n_periods == n_periods

    def test_downpayment_reduces_principal(self):
        loan = _mortgage(principal=250000, downpayment=50000)
        assert loan.principal == Decimal("200000")
        assert loan.downpayment == Decimal("50000")
        assert loan.listed_price == Decimal("250000")
        assert loan.monthly_payment() == _mortgage().monthly_payment()

    @pytest.mark.parametrize("raw,stored", [
        (0.0649999, Decimal("0.0650")),
        (0.06, Decimal("0.0600")),
        ("0.123456", Decimal("0.1235")),
        (0.00004, Decimal("0.0000")),
    ])
    def test_interest_rounded_to_four_places(self, raw, stored):
        assert _mortgage(interest=raw).interest == stored

    def test_term_unit_does_not_scale_periods(self):
        in_years = _mortgage(term=2, term_unit="years")
        in_months = _mortgage(term=2, term_unit="months")
        in_days = _mortgage(term=2, term_unit="days")
        assert len(in_years.schedule) == len(in_months.schedule) == len(in_days.schedule) == 24

    def test_schedule_computed_once(self):
        loan = _mortgage()
        assert loan.schedule is loan.schedule
        assert loan.amortize() == loan.schedule

    def test_half_period_rounds_to_even(self):
        # 2.5 annual periods: two payments, none beyond the term
        loan = Loan(principal=1000, interest=0.1, term=2.5, compounded="annually")
        assert len(loan.schedule) == 2
        assert loan.schedule[-1].balance > 0

    def test_str(self):
        assert str(_mortgage()) == "<Loan principal=200000.00, interest=0.06, term=30.0>"


class TestScheduleProperties:
    @pytest.mark.parametrize("params", SAMPLE_LOANS)
    def test_length(self, params):
        loan = Loan(**params)
        expected = int((Decimal(str(params["term"])) * loan.n_periods).to_integral_value())
        assert len(loan.schedule) == expected

    @pytest.mark.parametrize("params", SAMPLE_LOANS)
    def test_payment_split(self, params):
        for period in Loan(**params).schedule:
            assert abs(period.payment - (period.interest + period.principal)) <= CENT

    @pytest.mark.parametrize("params", SAMPLE_LOANS)
    def test_monotonic(self, params):
        schedule = Loan(**params).schedule
        for previous, current in zip(schedule, schedule[1:]):
            assert current.balance <= previous.balance
            assert current.total_interest >= previous.total_interest
            assert current.total_principal >= previous.total_principal

    @pytest.mark.parametrize("params", SAMPLE_LOANS)
    def test_final_balance_within_rounding_drift(self, params):
        loan = Loan(**params)
        assert abs(loan.schedule[-1].balance) <= _drift_bound(loan)

    @pytest.mark.parametrize("params", SAMPLE_LOANS)
    def test_total_interest_matches_last_period(self, params):
        loan = Loan(**params)
        assert loan.total_interest() == loan.schedule[-1].total_interest

    @pytest.mark.parametrize("params", SAMPLE_LOANS)
    def test_interest_to_principal_exact(self, params):
        loan = Loan(**params)
        expected = round(loan.total_interest() / loan.total_principal() * 100, 1)
        assert loan.interest_to_principal() == expected


class TestMortgageScenario:
    """200 000 at 6% over 30 years, compounded monthly."""

    def test_monthly_payment(self):
        assert _mortgage().monthly_payment() == Decimal("1199.10")

    def test_first_period(self):
        first = _mortgage().schedule[0]
        assert first.number == 1
        assert first.payment == Decimal("1199.10")
        assert first.interest == Decimal("1000.00")
        assert first.principal == Decimal("199.10")
        assert first.balance == Decimal("199800.90")
        assert first.total_interest == Decimal("1000.00")
        assert first.total_principal == Decimal("199.10")

    def test_totals(self):
        loan = _mortgage()
        assert loan.total_principal() == Decimal("200000")
        assert loan.total_interest() == Decimal("231677.04")
        assert loan.total_paid() == Decimal("431677.04")
        assert loan.total_paid() == loan.total_principal() + loan.total_interest()

    def test_ratios(self):
        loan = _mortgage()
        assert loan.interest_to_principal() == Decimal("115.8")
        assert loan.interest_to_paid() == Decimal("53.7")

    def test_rates(self):
        loan = _mortgage()
        assert loan.apr() == Decimal("6.00")
        assert loan.apy() == Decimal("6.17")

    def test_years_to_pay(self):
        assert _mortgage().years_to_pay() == Decimal("30.0")
        assert _mortgage(term="2.26").years_to_pay() == Decimal("2.3")


class TestTippingPoint:
    def test_first_period_with_more_principal(self):
        loan = _mortgage()
        point = loan.tipping_point()
        assert point is not None
        row = loan.schedule[point - 1]
        assert row.principal > row.interest
        assert all(p.principal <= p.interest for p in loan.schedule[: point - 1])

    def test_zero_interest_tips_immediately(self):
        assert Loan(principal=12000, interest=0, term=1).tipping_point() == 1

    def test_equal_split_is_not_a_tipping_point(self):
        # 100% rate, one annual payment of 2000.00: 1000.00 interest + 1000.00 principal
        loan = Loan(principal=1000, interest=1, term=1, compounded="annually")
        assert loan.schedule[0].interest == loan.schedule[0].principal == Decimal("1000.00")
        assert loan.tipping_point() is None


class TestSplitPayment:
    def test_regular_payment_matches_schedule(self):
        loan = _mortgage()
        split = loan.split_payment(1, Decimal("1199.10"))
        assert split == {"interest": Decimal("1000.00"), "principal": Decimal("199.10")}

    def test_uses_previous_balance(self):
        loan = _mortgage()
        split = loan.split_payment(2, 2000)
        # 199800.90 * 0.005 = 999.0045
        assert split["interest"] == Decimal("999.00")
        assert split["principal"] == Decimal("1001.00")

    def test_matches_schedule_interest_every_period(self):
        loan = _mortgage(term=1)
        for row in loan.schedule:
            assert loan.split_payment(row.number, row.payment)["interest"] == row.interest

    def test_does_not_mutate_schedule(self):
        loan = _mortgage()
        before = loan.schedule
        loan.split_payment(10, 50000)
        assert loan.schedule == before

    @pytest.mark.parametrize("period", [0, -1, 361])
    def test_out_of_range(self, period):
        with pytest.raises(PeriodOutOfRangeError):
            _mortgage().split_payment(period, 100)

    def test_out_of_range_is_index_and_loan_error(self):
        with pytest.raises(IndexError):
            _mortgage().split_payment(0, 100)
        with pytest.raises(LoanError):
            _mortgage().split_payment(0, 100)

    def test_non_integer_period(self):
        with pytest.raises(TypeError):
            _mortgage().split_payment(1.5, 100)


class TestSummary:
    def test_fields(self):
        summary = _mortgage(principal=250000, downpayment=50000).summary()
        assert summary["listed_price"] == Decimal("250000")
        assert summary["downpayment"] == Decimal("50000")
        assert summary["principal"] == Decimal("200000")
        assert summary["interest_rate"] == Decimal("6")
        assert summary["monthly_payment"] == Decimal("1199.10")
        assert summary["apy"] == Decimal("6.17")
        assert summary["interest_to_principal"] == Decimal("115.8")
        assert summary["term_unit"] == "years"
