from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from ..core.exceptions import ConflictError
from ..users.service import UserDirectory
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    day: date
    created: int = 0
    skipped: int = 0
    failed: int = 0


class AbsenceReconciler:
    """End-of-day sweep: every active user without a row for the day gets ABSENT.

    Each user is an independent insert, so a failure for one user never undoes
    or blocks the others. Re-running for the same day only fills gaps.
    """

    def __init__(self, attendance: AttendanceRepository, users: UserDirectory):
        self._attendance = attendance
        self._users = users

    def reconcile_day(self, day: date) -> ReconcileResult:
        created = skipped = failed = 0

        for user_id in self._users.list_active_user_ids():
            try:
                if self._attendance.exists_for_user_and_date(user_id, day):
                    skipped += 1
                    continue
                self._attendance.create_absent(user_id=user_id, attendance_date=day)
                created += 1
            except ConflictError:
                # A scan landed first; its row stands.
                skipped += 1
            except Exception:
                logger.exception("Absence reconcile failed for user %s on %s", user_id, day)
                failed += 1

        result = ReconcileResult(day=day, created=created, skipped=skipped, failed=failed)
        logger.info(
            "Absence reconcile for %s: created=%d skipped=%d failed=%d",
            day, result.created, result.skipped, result.failed,
        )
        return result
