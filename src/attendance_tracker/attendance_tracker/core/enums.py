from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Daily attendance status stored in the database."""

    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    LEAVE = "LEAVE"
    WFH = "WFH"
    ABSENT = "ABSENT"

    @property
    def is_present(self) -> bool:
        return self in (AttendanceStatus.CHECKED_IN, AttendanceStatus.CHECKED_OUT, AttendanceStatus.WFH)

    @property
    def is_completed(self) -> bool:
        """The day is closed; scans must not mutate it any further."""
        return self in (AttendanceStatus.CHECKED_OUT, AttendanceStatus.ABSENT, AttendanceStatus.LEAVE)
