"""Display formatting helpers for numbers and costs."""

from __future__ import annotations


def format_number(value: float) -> str:
    """Group thousands and keep at most two fraction digits."""

    rounded = round(value, 2)
    if rounded == int(rounded):
        return f"{int(rounded):,}"
    return f"{rounded:,.2f}".rstrip("0")


def format_cost(value: float) -> str:
    """Return a USD amount such as ``$1,234.50`` or ``-$0.25``."""

    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"
