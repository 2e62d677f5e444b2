"""Side-by-side comparison of already-built loans.

Loans are keyed by their 1-based position in the input sequence.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Iterable, Iterator

from .loan import Loan

logger = logging.getLogger(__name__)


class LoanComparison:
    """Read-only view over an ordered collection of Loan objects."""

    def __init__(self, loans: Iterable[Loan]) -> None:
        loans = tuple(loans)
        for position, loan in enumerate(loans, start=1):
            if not isinstance(loan, Loan):
                raise TypeError(
                    f"All elements must be Loan objects (element {position} is "
                    f"{type(loan).__name__})"
                )
        self._loans = loans
        logger.debug("Comparing %d loans", len(loans))

    @property
    def loans(self) -> tuple[Loan, ...]:
        return self._loans

    def __len__(self) -> int:
        return len(self._loans)

    def __iter__(self) -> Iterator[Loan]:
        return iter(self._loans)

    def __str__(self) -> str:
        lines = ["Loan Comparison Object", "Loans:"]
        lines.extend(f"Loan {i}: {loan}" for i, loan in enumerate(self._loans, start=1))
        return "\n".join(lines)

    def _by_loan(self, metric: Callable[[Loan], Decimal]) -> dict[int, Decimal]:
        return {i: metric(loan) for i, loan in enumerate(self._loans, start=1)}

    def compare_total_interest(self) -> dict[int, Decimal]:
        return self._by_loan(Loan.total_interest)

    def compare_monthly_payments(self) -> dict[int, Decimal]:
        return self._by_loan(Loan.monthly_payment)

    def compare_total_payments(self) -> dict[int, Decimal]:
        return self._by_loan(Loan.total_paid)

    def compare_total_payments_diff(self) -> list[list[Decimal]]:
        """Matrix of total-payment differences.

        ``matrix[i][j]`` is what loan ``i + 1`` costs in total minus what loan
        ``j + 1`` costs. The diagonal is zero and ``matrix[i][j] == -matrix[j][i]``.
        """
        totals = [loan.total_paid() for loan in self._loans]
        return [[row - col for col in totals] for row in totals]
