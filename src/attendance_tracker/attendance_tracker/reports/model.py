from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class PercentageResult:
    """Attendance summary for one user over a date range.

    ``percentage`` is present days over effective days (total minus leave),
    rounded half-up to two decimals; 0 when there are no effective days.
    """

    user_id: int
    username: str
    total_days: int = 0
    present_days: int = 0
    absent_days: int = 0
    leave_days: int = 0
    percentage: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)
