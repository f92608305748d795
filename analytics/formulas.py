"""
analytics/formulas.py

Pure arithmetic shared by the aggregator, summary, alert and insight layers.

Formulas
--------
Profit Margin   = total_profit / total_sales * 100
Profit Ratio    = profit / revenue
Percent Change  = (current - previous) / previous * 100

Division-by-zero cases return 0.0 rather than None, NaN or an exception,
so that every value can be formatted without a guard downstream.
"""

from __future__ import annotations

_ZERO = 0.0  # value returned when a denominator is zero


def safe_ratio(numerator: float, denominator: float) -> float:
    """
    numerator / denominator, or 0.0 when *denominator* is zero.
    """
    if denominator == 0:
        return _ZERO
    return numerator / denominator


def profit_margin(total_profit: float, total_sales: float) -> float:
    """
    Profit Margin = total_profit / total_sales * 100.

    Returns 0.0 when total_sales is zero.
    """
    return safe_ratio(total_profit, total_sales) * 100


def percent_change(current: float, previous: float) -> float:
    """
    Percent Change = (current - previous) / previous * 100.

    Returns 0.0 when previous is zero.
    """
    return safe_ratio(current - previous, previous) * 100
