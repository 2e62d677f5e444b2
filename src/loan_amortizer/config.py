"""Application-wide constants and loan defaults.

All tuneable defaults live here so there is a single place to adjust them.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Literal

# ── Type aliases ──────────────────────────────────────────────────────────────

TermUnit = Literal["days", "months", "years"]
Compounding = Literal["daily", "monthly", "annually"]

# ── Loan parameter tables ─────────────────────────────────────────────────────

TERM_UNITS: frozenset[str] = frozenset({"days", "months", "years"})

# Compounding method → periods per year
COMPOUNDING_PERIODS: dict[str, int] = {
    "daily": 365,
    "monthly": 12,
    "annually": 1,
}

# ── Loan defaults ─────────────────────────────────────────────────────────────

DEFAULT_TERM_UNIT: TermUnit = "years"
DEFAULT_COMPOUNDING: Compounding = "monthly"
DEFAULT_CURRENCY: str = "$"

# ── Numeric convenience ───────────────────────────────────────────────────────

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")            # schedule amounts, APR / APY percentages
RATE_QUANTUM = Decimal("0.0001")  # stored annual rate (two decimals of a percent)
