from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value


def require_date_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("start date must not be after end date")
