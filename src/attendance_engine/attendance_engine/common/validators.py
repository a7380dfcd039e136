from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} must not be empty")
    return str(value).strip()


def require_percentage(value: float, field_name: str = "target percentage") -> float:
    try:
        pct = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if not 0 < pct <= 100:
        raise ValidationError(f"{field_name} must be within (0, 100]")
    return pct


def require_non_negative(value: int, field_name: str) -> int:
    if value is None or int(value) < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return int(value)
