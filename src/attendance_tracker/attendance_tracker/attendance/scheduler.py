from __future__ import annotations

import logging
from typing import Any, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..common.datetime_utils import Clock, SystemClock
from ..core.constants import DEFAULT_RECONCILE_HOUR, DEFAULT_RECONCILE_MINUTE, DEFAULT_TOKEN_PURGE_HOURS
from .reconciler import AbsenceReconciler, ReconcileResult
from .service import AttendanceService

logger = logging.getLogger(__name__)

RECONCILE_JOB_ID = "attendance-reconcile-absences"
PURGE_JOB_ID = "attendance-purge-tokens"


class ReconcileScheduler:
    """Wall-clock trigger for the daily absence sweep and token cleanup.

    Note: ``run_once`` / ``purge_tokens`` are the job bodies; tests call them
    directly instead of waiting for the cron to fire.
    """

    def __init__(
        self,
        reconciler: AbsenceReconciler,
        attendance: Optional[AttendanceService] = None,
        *,
        clock: Optional[Clock] = None,
        hour: int = DEFAULT_RECONCILE_HOUR,
        minute: int = DEFAULT_RECONCILE_MINUTE,
        purge_hours: int = DEFAULT_TOKEN_PURGE_HOURS,
        scheduler: Optional[Any] = None,
    ):
        self._reconciler = reconciler
        self._attendance = attendance
        self._clock = clock or SystemClock()
        self._hour = int(hour)
        self._minute = int(minute)
        self._purge_hours = int(purge_hours)
        self._scheduler = scheduler or BackgroundScheduler()

    def run_once(self) -> ReconcileResult:
        return self._reconciler.reconcile_day(self._clock.today())

    def purge_tokens(self) -> int:
        if self._attendance is None:
            return 0
        return self._attendance.purge_expired_tokens()

    def start(self) -> None:
        self._scheduler.add_job(
            self.run_once,
            CronTrigger(hour=self._hour, minute=self._minute),
            id=RECONCILE_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if self._attendance is not None and self._purge_hours > 0:
            self._scheduler.add_job(
                self.purge_tokens,
                "interval",
                hours=self._purge_hours,
                id=PURGE_JOB_ID,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
        self._scheduler.start()
        logger.info("Absence reconcile scheduled daily at %02d:%02d", self._hour, self._minute)

    def shutdown(self) -> None:
        self._scheduler.shutdown(wait=False)
