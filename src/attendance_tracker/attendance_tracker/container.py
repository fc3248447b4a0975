from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciler import AbsenceReconciler
from .attendance.repository import AttendanceRepository
from .attendance.scheduler import ReconcileScheduler
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, SystemClock
from .core.constants import (
    DEFAULT_RECONCILE_HOUR,
    DEFAULT_RECONCILE_MINUTE,
    DEFAULT_TOKEN_PURGE_HOURS,
    DEFAULT_TOKEN_TTL_MINUTES,
)
from .database.connection import DBConfig, DatabaseConnection, TransactionManager
from .reports.service import AttendanceReportService
from .tokens.mysql_token_repository import MySQLAttendanceTokenRepository
from .tokens.repository import AttendanceTokenRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserDirectory


@dataclass(frozen=True)
class Container:
    conn: TransactionManager
    clock: Clock

    users_repo: UserRepository
    tokens_repo: AttendanceTokenRepository
    attendance_repo: AttendanceRepository

    user_directory: UserDirectory
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    reconciler: AbsenceReconciler
    scheduler: ReconcileScheduler


def wire(
    *,
    conn: TransactionManager,
    users_repo: UserRepository,
    tokens_repo: AttendanceTokenRepository,
    attendance_repo: AttendanceRepository,
    clock: Optional[Clock] = None,
    token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES,
    reconcile_hour: int = DEFAULT_RECONCILE_HOUR,
    reconcile_minute: int = DEFAULT_RECONCILE_MINUTE,
    token_purge_hours: int = DEFAULT_TOKEN_PURGE_HOURS,
) -> Container:
    """Build services on top of any repository implementations."""

    clock = clock or SystemClock()
    user_directory = UserDirectory(users_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        tokens_repo,
        user_directory,
        conn,
        clock=clock,
        token_ttl_minutes=token_ttl_minutes,
    )
    report_service = AttendanceReportService(attendance_repo, user_directory, clock=clock)
    reconciler = AbsenceReconciler(attendance_repo, user_directory)
    scheduler = ReconcileScheduler(
        reconciler,
        attendance_service,
        clock=clock,
        hour=reconcile_hour,
        minute=reconcile_minute,
        purge_hours=token_purge_hours,
    )

    return Container(
        conn=conn,
        clock=clock,
        users_repo=users_repo,
        tokens_repo=tokens_repo,
        attendance_repo=attendance_repo,
        user_directory=user_directory,
        attendance_service=attendance_service,
        report_service=report_service,
        reconciler=reconciler,
        scheduler=scheduler,
    )


def build_container(*, db_config: dict, **options) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        tokens_repo=MySQLAttendanceTokenRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        **options,
    )
