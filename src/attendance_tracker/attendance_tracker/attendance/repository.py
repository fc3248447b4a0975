from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_for_user_and_date(
        self, user_id: int, attendance_date: date, *, for_update: bool = False
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def exists_for_user_and_date(self, user_id: int, attendance_date: date) -> bool:
        raise NotImplementedError

    def create_checkin(self, *, user_id: int, attendance_date: date, check_in_time: datetime) -> AttendanceRecord:
        """Insert a CHECKED_IN row. Raises ConflictError if the day already has one."""

        raise NotImplementedError

    def create_absent(
        self, *, user_id: int, attendance_date: date, marked_by: Optional[int] = None
    ) -> AttendanceRecord:
        """Insert an ABSENT row. Raises ConflictError if the day already has one."""

        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        """Close an open day. False when the row was closed concurrently."""

        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
