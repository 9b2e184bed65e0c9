#!/usr/bin/env python3
"""
Utility functions shared across the application.
All rounding and currency formatting lives here so the calculation core can
return full-precision numbers.
"""

import math
from decimal import Decimal, ROUND_HALF_UP


def format_currency(amount: float) -> str:
    """
    Format amount as a compact currency string for cards and chart labels.

    Args:
        amount: Amount to format

    Returns:
        "$2.55M", "$359K" or "$950" style string
    """
    if abs(amount) >= 1_000_000:
        return f"${amount / 1_000_000:.2f}M"
    if abs(amount) >= 1_000:
        return f"${amount / 1_000:.0f}K"
    return f"${amount:,.0f}"


def format_currency_full(amount: float, thousands_sep: bool = True) -> str:
    """
    Format amount as a whole-dollar currency string.

    Args:
        amount: Amount to format
        thousands_sep: Whether to include thousands separator

    Returns:
        Formatted currency string
    """
    rounded = round_currency(amount)
    if thousands_sep:
        return f"${rounded:,.0f}"
    else:
        return f"${rounded:.0f}"


def format_percentage(value: float, decimal_places: int = 1) -> str:
    """
    Format value as percentage string.

    Args:
        value: Value to format (0.15 = 15%)
        decimal_places: Number of decimal places

    Returns:
        Formatted percentage string
    """
    return f"{value*100:.{decimal_places}f}%"


def round_currency(amount: float, increment: int = 1) -> float:
    """
    Round half-up to the nearest dollar, hundred or thousand.

    Args:
        amount: Full-precision amount
        increment: 1, 100 or 1000

    Returns:
        Rounded amount as float
    """
    if amount is None or not math.isfinite(amount):
        return 0.0
    quantum = Decimal(increment)
    scaled = (Decimal(str(amount)) / quantum).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return float(scaled * quantum)


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default if division by zero.

    Args:
        numerator: Numerator value
        denominator: Denominator value
        default: Default value if division by zero

    Returns:
        Division result or default
    """
    try:
        if denominator == 0:
            return default
        return numerator / denominator
    except (TypeError, ValueError):
        return default


def clamp(value: float, min_val: float, max_val: float) -> float:
    """
    Clamp value between minimum and maximum bounds.
    """
    return max(min_val, min(max_val, value))


def budget_range(amount: float, spread: float = 0.15) -> tuple:
    """
    Low/high bid range around a category budget (±15% by default).
    """
    return amount * (1 - spread), amount * (1 + spread)
