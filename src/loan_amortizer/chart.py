"""Amortization chart.

Plots the loan balance against cumulative principal and interest paid, by
payment number.
"""
from __future__ import annotations

import plotly.graph_objects as go

from .loan import Loan

SERIES_COLORS = {
    "Loan Balance": "#0041a7",
    "Principal Paid": "#4898ff",
    "Interest Paid": "#88dd9b",
}


def create_amortization_chart(
    loan: Loan,
    title: str = "Amortization Schedule",
    height: int = 500,
) -> go.Figure:
    """Create a line chart of the loan's amortization schedule.

    Args:
        loan: Loan whose schedule is plotted
        title: Chart title
        height: Chart height in pixels

    Returns:
        Plotly Figure with one trace per series in ``SERIES_COLORS``
    """
    numbers = [period.number for period in loan.schedule]
    series = {
        "Loan Balance": [float(period.balance) for period in loan.schedule],
        "Principal Paid": [float(period.total_principal) for period in loan.schedule],
        "Interest Paid": [float(period.total_interest) for period in loan.schedule],
    }

    fig = go.Figure()
    for name, values in series.items():
        fig.add_trace(
            go.Scatter(
                x=numbers,
                y=values,
                mode="lines",
                name=name,
                line=dict(color=SERIES_COLORS[name], width=2),
            )
        )

    fig.update_layout(
        title={"text": title, "x": 0.5, "xanchor": "center"},
        height=height,
        xaxis_title="Payment Number",
        yaxis_title=f"Balance ({loan.currency})",
        legend=dict(title="Legend", orientation="h", yanchor="top", y=-0.2, x=0.5, xanchor="center"),
        template="plotly_white",
    )
    fig.update_yaxes(tickprefix=loan.currency, tickformat=",.0f")

    return fig
