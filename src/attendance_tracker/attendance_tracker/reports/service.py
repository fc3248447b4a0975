from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..attendance.model import AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import require_date_range
from ..core.constants import EPOCH_DATE
from ..core.enums import AttendanceStatus
from ..users.service import UserDirectory
from .model import PercentageResult

_HUNDREDTH = Decimal("0.01")


def round_half_up(value: Decimal) -> float:
    return float(value.quantize(_HUNDREDTH, rounding=ROUND_HALF_UP))


def summarize(user_id: int, username: str, rows: Iterable[AttendanceReportRow]) -> PercentageResult:
    total = present = absent = leave = 0
    for r in rows:
        total += 1
        if r.status.is_present:
            present += 1
        elif r.status == AttendanceStatus.ABSENT:
            absent += 1
        elif r.status == AttendanceStatus.LEAVE:
            leave += 1

    effective = total - leave
    percentage = 0.0 if effective == 0 else round_half_up(Decimal(present * 100) / Decimal(effective))

    return PercentageResult(
        user_id=int(user_id),
        username=username,
        total_days=total,
        present_days=present,
        absent_days=absent,
        leave_days=leave,
        percentage=percentage,
    )


class AttendanceReportService:
    """Read-only percentage reports over attendance records."""

    def __init__(self, attendance: AttendanceRepository, users: UserDirectory, *, clock: Optional[Clock] = None):
        self._attendance = attendance
        self._users = users
        self._clock = clock or SystemClock()

    def compute_percentage(self, user_id: int, start: date, end: date) -> PercentageResult:
        require_date_range(start, end)
        user = self._users.require(user_id)
        rows = self._attendance.get_report_rows(start_date=start, end_date=end, user_id=user.user_id)
        return summarize(user.user_id, user.username, rows)

    def compute_my_percentage(self, user_id: int) -> PercentageResult:
        """From the day the account was created up to today."""

        user = self._users.require(user_id)
        end = self._clock.today()
        start = user.created_at.date() if user.created_at else EPOCH_DATE
        if start > end:
            start = end
        return self.compute_percentage(user.user_id, start, end)

    def compute_percentage_for_range(
        self,
        start: date,
        end: date,
        user_id: Optional[int] = None,
    ) -> list[PercentageResult]:
        require_date_range(start, end)
        if user_id is not None:
            # Single-user scope always yields one row, zero-valued when empty.
            return [self.compute_percentage(user_id, start, end)]

        rows = self._attendance.get_report_rows(start_date=start, end_date=end)

        grouped: dict[int, list[AttendanceReportRow]] = {}
        usernames: dict[int, str] = {}
        for r in rows:
            grouped.setdefault(r.user_id, []).append(r)
            usernames.setdefault(r.user_id, r.username)

        return [summarize(uid, usernames[uid], grouped[uid]) for uid in sorted(grouped)]
