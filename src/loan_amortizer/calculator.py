"""Core financial calculation functions.

All monetary values use decimal.Decimal.
Rounding: ROUND_HALF_UP to 2 decimal places at *every* step of the
schedule, not only on final outputs. Each period starts from the previous
period's rounded balance, so the rounding compounds over the life of the
loan and the last balance keeps whatever residual drift that produces.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .config import CENT, HUNDRED, ONE, ZERO

logger = logging.getLogger(__name__)


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def period_count(term: Decimal, n_periods: int) -> int:
    """Number of schedule rows: ``term * n_periods`` rounded half-to-even."""
    return int(round(term * n_periods))


@dataclass(frozen=True)
class PaymentPeriod:
    number: int
    payment: Decimal
    interest: Decimal
    principal: Decimal
    total_interest: Decimal
    total_principal: Decimal
    balance: Decimal


def compute_payment(
    principal: Decimal,
    annual_rate: Decimal,
    n_periods: int,
    term: Decimal,
) -> Decimal:
    """Return the fixed periodic payment of an amortizing loan.

    Uses the closed-form annuity formula:
        payment = P * r / (1 - (1 + r)^(-n * term)),  r = annual_rate / n

    Special case: if annual_rate == 0 the formula degenerates (0 / 0) and
    its limit P / (n * term) is used instead.
    """
    if term <= ZERO:
        raise ValueError("term must be > 0")
    if n_periods <= 0:
        raise ValueError("n_periods must be > 0")

    if annual_rate == ZERO:
        return round_cents(principal / (Decimal(n_periods) * term))

    r = annual_rate / Decimal(n_periods)
    discount = (ONE + r) ** (-Decimal(n_periods) * term)
    return round_cents(principal * r / (ONE - discount))


def build_amortization_schedule(
    principal: Decimal,
    annual_rate: Decimal,
    n_periods: int,
    term: Decimal,
) -> tuple[PaymentPeriod, ...]:
    """Build the full period-by-period amortization schedule."""
    payment = compute_payment(principal, annual_rate, n_periods, term)
    r = annual_rate / Decimal(n_periods)

    rows: list[PaymentPeriod] = []
    balance = principal
    total_interest = ZERO
    total_principal = ZERO

    for number in range(1, period_count(term, n_periods) + 1):
        interest = round_cents(balance * r)
        principal_component = round_cents(payment - interest)
        total_interest = round_cents(total_interest + interest)
        total_principal = round_cents(total_principal + principal_component)
        balance = round_cents(balance - principal_component)

        rows.append(
            PaymentPeriod(
                number=number,
                payment=payment,
                interest=interest,
                principal=principal_component,
                total_interest=total_interest,
                total_principal=total_principal,
                balance=balance,
            )
        )

    logger.debug(
        "Built schedule: %d periods, payment %s, residual balance %s",
        len(rows), payment, balance,
    )
    return tuple(rows)


def compute_apr(principal: Decimal, annual_rate: Decimal) -> Decimal:
    """Annual percentage rate as a percent.

    One year of simple interest over the principal, which reduces to the
    nominal rate.
    """
    simple_interest = principal * annual_rate * ONE
    return round_cents(simple_interest / principal * HUNDRED)


def compute_apy(annual_rate: Decimal, n_periods: int) -> Decimal:
    """Annual percentage yield (effective annual rate) as a percent."""
    effective_rate = (ONE + annual_rate / Decimal(n_periods)) ** n_periods - ONE
    return round_cents(effective_rate * HUNDRED)
