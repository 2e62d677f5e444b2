"""The Loan value type: validated parameters plus a precomputed schedule.

A Loan is fully computed at construction time. Every derived metric is a
pure function of the stored parameters and schedule; nothing recomputes or
mutates state after ``__post_init__`` returns.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from .calculator import (
    PaymentPeriod,
    build_amortization_schedule,
    compute_apr,
    compute_apy,
    compute_payment,
    round_cents,
)
from .config import (
    COMPOUNDING_PERIODS,
    DEFAULT_COMPOUNDING,
    DEFAULT_CURRENCY,
    DEFAULT_TERM_UNIT,
    HUNDRED,
    ONE,
    RATE_QUANTUM,
    TERM_UNITS,
    ZERO,
    Compounding,
    TermUnit,
)

logger = logging.getLogger(__name__)


class LoanError(Exception):
    """Base class for loan errors."""


class ValidationError(LoanError, ValueError):
    """Raised when a Loan is constructed with invalid parameters."""


class PeriodOutOfRangeError(LoanError, IndexError):
    """Raised when a period number falls outside the loan's schedule."""


def _to_decimal(value: object, name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"`{name}` must be a number, got {value!r}")
    try:
        result = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"`{name}` must be a number, got {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"`{name}` must be a finite number, got {value!r}")
    return result


def _ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    return round(numerator / denominator * HUNDRED, 1)


@dataclass(frozen=True)
class Loan:
    """One amortizing debt instrument.

    ``principal`` is the amount before the downpayment; after construction it
    holds the financed amount (``principal - downpayment``). ``interest`` is
    the nominal annual rate as a fraction and is stored rounded to 4 decimal
    places. ``term`` is read as years by the period math whatever
    ``term_unit`` says.
    """
    principal: Decimal
    interest: Decimal
    term: Decimal
    term_unit: TermUnit = DEFAULT_TERM_UNIT
    compounded: Compounding = DEFAULT_COMPOUNDING
    currency: str = DEFAULT_CURRENCY
    downpayment: Decimal = ZERO
    n_periods: int = field(init=False)
    schedule: tuple[PaymentPeriod, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.term_unit, str) or self.term_unit not in TERM_UNITS:
            raise ValidationError("`term_unit` must be 'days', 'years' or 'months'")
        if not isinstance(self.compounded, str) or self.compounded not in COMPOUNDING_PERIODS:
            raise ValidationError('`compounded` must be "daily", "monthly" or "annually"')

        principal = _to_decimal(self.principal, "principal")
        interest = _to_decimal(self.interest, "interest")
        term = _to_decimal(self.term, "term")
        downpayment = _to_decimal(self.downpayment, "downpayment")

        if principal <= ZERO:
            raise ValidationError("`principal` must be positive value")
        if not ZERO <= interest <= ONE:
            raise ValidationError("`interest` must be between zero and one")
        if term <= ZERO:
            raise ValidationError("`term` must be a positive number")
        if downpayment < ZERO:
            raise ValidationError("`downpayment` must be a positive value")
        if downpayment >= principal:
            raise ValidationError("`downpayment` must be less than `principal`")

        object.__setattr__(self, "principal", principal - downpayment)
        object.__setattr__(self, "interest", interest.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP))
        object.__setattr__(self, "term", term)
        object.__setattr__(self, "downpayment", downpayment)
        object.__setattr__(self, "n_periods", COMPOUNDING_PERIODS[self.compounded])
        object.__setattr__(self, "schedule", self.amortize())

        logger.debug(
            "Loan principal=%s interest=%s term=%s %s compounded %s",
            self.principal, self.interest, self.term, self.term_unit, self.compounded,
        )

    def __str__(self) -> str:
        return (
            f"<Loan principal={self.principal:.2f}, "
            f"interest={self.interest:.2f}, term={self.term:.1f}>"
        )

    # ── Schedule ──────────────────────────────────────────────────────────────

    @property
    def listed_price(self) -> Decimal:
        return self.principal + self.downpayment

    def monthly_payment(self) -> Decimal:
        """Fixed payment due every period (despite the name, per compounding period)."""
        return compute_payment(self.principal, self.interest, self.n_periods, self.term)

    def amortize(self) -> tuple[PaymentPeriod, ...]:
        return build_amortization_schedule(
            self.principal, self.interest, self.n_periods, self.term
        )

    # ── Derived metrics ───────────────────────────────────────────────────────

    def total_principal(self) -> Decimal:
        return self.principal

    def total_interest(self) -> Decimal:
        return sum((period.interest for period in self.schedule), ZERO)

    def total_paid(self) -> Decimal:
        return self.total_principal() + self.total_interest()

    def interest_to_principal(self) -> Decimal:
        """Total interest as a percentage of the principal, one decimal."""
        return _ratio(self.total_interest(), self.total_principal())

    def interest_to_paid(self) -> Decimal:
        """Total interest as a percentage of everything paid, one decimal."""
        return _ratio(self.total_interest(), self.total_paid())

    def years_to_pay(self) -> Decimal:
        return round(self.term, 1)

    def apr(self) -> Decimal:
        return compute_apr(self.principal, self.interest)

    def apy(self) -> Decimal:
        return compute_apy(self.interest, self.n_periods)

    def tipping_point(self) -> Optional[int]:
        """Return the first period where more principal than interest is paid.

        Returns None when no period qualifies (e.g. a payment that never
        outgrows the interest due).
        """
        return next(
            (period.number for period in self.schedule if period.principal > period.interest),
            None,
        )

    def split_payment(self, period_number: int, amount: object) -> dict[str, Decimal]:
        """Split an arbitrary *amount* paid at *period_number* into interest and principal.

        Interest accrues on the balance outstanding before that period's
        payment: the principal for period 1, the previous period's balance
        otherwise. The schedule is not modified.
        """
        if isinstance(period_number, bool) or not isinstance(period_number, int):
            raise TypeError(f"period_number must be an int, got {period_number!r}")
        if not 1 <= period_number <= len(self.schedule):
            raise PeriodOutOfRangeError(
                f"period_number must be between 1 and {len(self.schedule)}, got {period_number}"
            )
        amount = _to_decimal(amount, "amount")

        if period_number == 1:
            balance = self.principal
        else:
            balance = self.schedule[period_number - 2].balance
        interest = round_cents(balance * (self.interest / Decimal(self.n_periods)))
        return {"interest": interest, "principal": round_cents(amount - interest)}

    # ── Presentation support ──────────────────────────────────────────────────

    def summary(self) -> dict[str, Decimal | str | Optional[int]]:
        """All report fields in display order."""
        return {
            "listed_price": self.listed_price,
            "downpayment": self.downpayment,
            "principal": self.principal,
            "interest_rate": self.interest * HUNDRED,
            "apy": self.apy(),
            "apr": self.apr(),
            "term": self.term,
            "term_unit": self.term_unit,
            "monthly_payment": self.monthly_payment(),
            "total_principal": self.total_principal(),
            "total_interest": self.total_interest(),
            "total_paid": self.total_paid(),
            "interest_to_principal": self.interest_to_principal(),
            "interest_to_paid": self.interest_to_paid(),
            "years_to_pay": self.years_to_pay(),
            "tipping_point": self.tipping_point(),
        }
