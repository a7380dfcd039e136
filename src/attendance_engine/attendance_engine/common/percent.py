"""Percentage rules shared by stats, projections and target solving.

A total of zero always yields 0%. Rounding is half-up, not banker's rounding.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def exact_percentage(present: int, total: int) -> Decimal:
    if total <= 0:
        return Decimal(0)
    return Decimal(present) * 100 / Decimal(total)


def percentage(present: int, total: int) -> int:
    """present/total as a whole-number percentage."""
    return int(exact_percentage(present, total).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage_1dp(present: int, total: int) -> float:
    """present/total rounded to one decimal place."""
    return float(exact_percentage(present, total).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
