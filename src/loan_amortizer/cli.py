"""Command-line interface: click command group + rich rendering.

Subcommands:
  summary   loan summary report
  schedule  period-by-period amortization table
  compare   side-by-side comparison of several loans
  chart     write the amortization chart to an HTML file
"""
from __future__ import annotations

import logging
import sys
from decimal import Decimal
from functools import wraps
from typing import Callable, Optional

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .chart import create_amortization_chart
from .comparison import LoanComparison
from .config import COMPOUNDING_PERIODS, DEFAULT_COMPOUNDING, DEFAULT_CURRENCY, DEFAULT_TERM_UNIT, TERM_UNITS
from .loan import Loan, LoanError

console = Console()
err_console = Console(stderr=True, style="bold red")

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────────────────
# Formatting helpers
# ──────────────────────────────────────────────────────────────────────────────

def _fmt_money(value: Decimal, currency: str) -> str:
    return f"{currency}{value:,.2f}"


def _fmt_amount(value: Decimal) -> str:
    return f"{value:,.2f}"


def _fmt_pct(value: Decimal) -> str:
    return f"{value:.2f}%"


# ──────────────────────────────────────────────────────────────────────────────
# Result display
# ──────────────────────────────────────────────────────────────────────────────

def display_summary(loan: Loan) -> None:
    cur = loan.currency
    summary = loan.summary()

    console.print(Panel(f"[bold green]Loan Summary[/bold green] {loan}", expand=False))

    t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Field", style="cyan")
    t.add_column("Value", justify="right")

    t.add_row("Home price", _fmt_money(summary["listed_price"], cur))
    t.add_row("Downpayment", _fmt_money(summary["downpayment"], cur))
    t.add_row("Original balance", _fmt_money(summary["principal"], cur))
    t.add_row("Interest rate", _fmt_pct(summary["interest_rate"]))
    t.add_row("APY", _fmt_pct(summary["apy"]))
    t.add_row("APR", _fmt_pct(summary["apr"]))
    t.add_row("Term", f"{summary['term']:.1f} {summary['term_unit']}")
    t.add_row("Monthly payment", _fmt_money(summary["monthly_payment"], cur))
    t.add_section()
    t.add_row("Total principal payments", _fmt_money(summary["total_principal"], cur))
    t.add_row("Total interest payments", _fmt_money(summary["total_interest"], cur))
    t.add_row("Total payments", _fmt_money(summary["total_paid"], cur))
    t.add_row("Interest to principal", _fmt_pct(summary["interest_to_principal"]))
    t.add_row("Interest to total paid", _fmt_pct(summary["interest_to_paid"]))
    t.add_row("Years to pay", f"{summary['years_to_pay']:.1f}")
    tipping = summary["tipping_point"]
    t.add_row("Tipping point", f"payment {tipping}" if tipping is not None else "never")
    console.print(t)


def display_schedule(loan: Loan, limit: Optional[int] = None, totals: bool = False) -> None:
    rows = loan.schedule if limit is None else loan.schedule[:limit]

    t = Table(
        title=f"Amortization Schedule ({loan.currency})",
        box=box.MINIMAL_HEAVY_HEAD,
        caption=f"{len(rows)} of {len(loan.schedule)} payments",
    )
    columns = ["No.", "Payment", "Interest", "Principal"]
    if totals:
        columns += ["Total Interest", "Total Principal"]
    columns.append("Balance")
    for col in columns:
        t.add_column(col, justify="right")

    for period in rows:
        cells = [
            str(period.number),
            _fmt_amount(period.payment),
            _fmt_amount(period.interest),
            _fmt_amount(period.principal),
        ]
        if totals:
            cells += [_fmt_amount(period.total_interest), _fmt_amount(period.total_principal)]
        cells.append(_fmt_amount(period.balance))
        t.add_row(*cells)
    console.print(t)


def display_comparison(comparison: LoanComparison) -> None:
    console.print(Panel("[bold green]Loan Comparison Summary[/bold green]", expand=False))

    interest = comparison.compare_total_interest()
    payments = comparison.compare_monthly_payments()
    totals = comparison.compare_total_payments()

    t = Table(box=box.SIMPLE, show_header=True, padding=(0, 2))
    t.add_column("Loan", style="cyan")
    t.add_column("Monthly payment", justify="right")
    t.add_column("Total interest", justify="right")
    t.add_column("Total payments", justify="right")
    for index, loan in enumerate(comparison, start=1):
        t.add_row(
            str(index),
            _fmt_money(payments[index], loan.currency),
            _fmt_money(interest[index], loan.currency),
            _fmt_money(totals[index], loan.currency),
        )
    console.print(t)

    matrix = comparison.compare_total_payments_diff()
    console.print("[bold]Total Payments Difference[/bold] (row minus column)")
    m = Table(box=box.SIMPLE, show_header=True)
    m.add_column("", style="cyan")
    for index in range(1, len(comparison) + 1):
        m.add_column(str(index), justify="right")
    for index, row in enumerate(matrix, start=1):
        m.add_row(str(index), *(_fmt_amount(cell) for cell in row))
    console.print(m)


# ──────────────────────────────────────────────────────────────────────────────
# Input helpers
# ──────────────────────────────────────────────────────────────────────────────

def _build_loan(**kwargs) -> Loan:
    """Construct a Loan, printing the validation error and exiting on failure."""
    try:
        return Loan(**kwargs)
    except LoanError as exc:
        err_console.print(f"Parameter error: {exc}")
        sys.exit(1)


def _parse_loan_spec(raw: str, currency: str) -> Loan:
    """Parse ``PRINCIPAL:RATE:TERM[:COMPOUNDED]`` into a Loan."""
    parts = [part.strip() for part in raw.split(":")]
    if len(parts) not in (3, 4):
        err_console.print(
            f"Invalid --loan value '{raw}'. Use PRINCIPAL:RATE:TERM[:COMPOUNDED] (e.g. 200000:0.06:30)."
        )
        sys.exit(1)
    compounded = parts[3] if len(parts) == 4 else DEFAULT_COMPOUNDING
    return _build_loan(
        principal=parts[0],
        interest=parts[1],
        term=parts[2],
        compounded=compounded,
        currency=currency,
    )


def loan_options(func: Callable) -> Callable:
    """Attach the loan parameter options and pass a built Loan as ``loan``."""

    @click.option("--principal", type=str, required=True, help="Listed price / amount borrowed before downpayment")
    @click.option("--interest", type=str, required=True, help="Nominal annual rate as a fraction (e.g. 0.06)")
    @click.option("--term", type=str, required=True, help="Loan term (read as years)")
    @click.option("--term-unit", type=click.Choice(sorted(TERM_UNITS)), default=DEFAULT_TERM_UNIT, show_default=True)
    @click.option("--compounded", type=click.Choice(list(COMPOUNDING_PERIODS)), default=DEFAULT_COMPOUNDING, show_default=True)
    @click.option("--currency", type=str, default=DEFAULT_CURRENCY, show_default=True, help="Currency symbol")
    @click.option("--downpayment", type=str, default="0", show_default=True, help="Downpayment amount")
    @wraps(func)
    def wrapper(principal, interest, term, term_unit, compounded, currency, downpayment, **kwargs):
        loan = _build_loan(
            principal=principal,
            interest=interest,
            term=term,
            term_unit=term_unit,
            compounded=compounded,
            currency=currency,
            downpayment=downpayment,
        )
        return func(loan=loan, **kwargs)

    return wrapper


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


# ──────────────────────────────────────────────────────────────────────────────
# Click entry point
# ──────────────────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Loan amortization calculator."""
    _configure_logging(verbose)


@main.command()
@loan_options
def summary(loan: Loan) -> None:
    """Print the summary report of a loan."""
    display_summary(loan)


@main.command()
@loan_options
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Show only the first N payments")
@click.option("--totals", is_flag=True, help="Include cumulative interest and principal columns")
def schedule(loan: Loan, limit: Optional[int], totals: bool) -> None:
    """Print the amortization schedule of a loan."""
    display_schedule(loan, limit=limit, totals=totals)


@main.command()
@click.option(
    "--loan", "loan_specs", multiple=True, required=True,
    help="PRINCIPAL:RATE:TERM[:COMPOUNDED]; repeat once per loan",
)
@click.option("--currency", type=str, default=DEFAULT_CURRENCY, show_default=True, help="Currency symbol")
def compare(loan_specs: tuple[str, ...], currency: str) -> None:
    """Compare several loans side by side."""
    loans = [_parse_loan_spec(spec, currency) for spec in loan_specs]
    display_comparison(LoanComparison(loans))


@main.command()
@loan_options
@click.option("--output", type=click.Path(dir_okay=False, writable=True), required=True, help="HTML file to write")
def chart(loan: Loan, output: str) -> None:
    """Write the amortization chart of a loan to an HTML file."""
    fig = create_amortization_chart(loan)
    fig.write_html(output)
    logger.info("Chart written to %s", output)
    console.print(f"[green]Chart written to {output}[/green]")
