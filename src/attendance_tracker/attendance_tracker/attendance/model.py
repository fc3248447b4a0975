from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one user's attendance for one calendar day."""

    attendance_id: int
    user_id: int
    attendance_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    marked_by: Optional[int] = None

    @property
    def is_day_complete(self) -> bool:
        return self.check_out_time is not None or self.status.is_completed


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports (record joined with its user)."""

    user_id: int
    username: str
    attendance_date: date
    status: AttendanceStatus
