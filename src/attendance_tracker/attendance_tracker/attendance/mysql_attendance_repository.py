from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, user_id, attendance_date, check_in_time, check_out_time, status, marked_by"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    marked_by = r.get("marked_by")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        attendance_date=normalize_mysql_date(r["attendance_date"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        marked_by=int(marked_by) if marked_by is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(
        self, user_id: int, attendance_date: date, *, for_update: bool = False
    ) -> Optional[AttendanceRecord]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND attendance_date=%s{lock}
                """,
                (int(user_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def exists_for_user_and_date(self, user_id: int, attendance_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM attendance_records WHERE user_id=%s AND attendance_date=%s",
                (int(user_id), attendance_date),
            )
            return fetchone(cur) is not None

    def _insert(
        self,
        *,
        user_id: int,
        attendance_date: date,
        check_in_time: Optional[datetime],
        status: AttendanceStatus,
        marked_by: Optional[int],
    ) -> AttendanceRecord:
        # Duplicate (user_id, attendance_date) surfaces as ConflictError from db_cursor.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, attendance_date, check_in_time, check_out_time, status, marked_by)
                VALUES(%s,%s,%s,NULL,%s,%s)
                """,
                (int(user_id), attendance_date, check_in_time, status.value, marked_by),
            )
            return AttendanceRecord(
                attendance_id=int(cur.lastrowid),
                user_id=int(user_id),
                attendance_date=attendance_date,
                check_in_time=check_in_time,
                check_out_time=None,
                status=status,
                marked_by=marked_by,
            )

    def create_checkin(self, *, user_id: int, attendance_date: date, check_in_time: datetime) -> AttendanceRecord:
        return self._insert(
            user_id=user_id,
            attendance_date=attendance_date,
            check_in_time=check_in_time,
            status=AttendanceStatus.CHECKED_IN,
            marked_by=None,
        )

    def create_absent(
        self, *, user_id: int, attendance_date: date, marked_by: Optional[int] = None
    ) -> AttendanceRecord:
        return self._insert(
            user_id=user_id,
            attendance_date=attendance_date,
            check_in_time=None,
            status=AttendanceStatus.ABSENT,
            marked_by=marked_by,
        )

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s
                WHERE attendance_id=%s AND check_out_time IS NULL AND status IN (%s, %s)
                """,
                (
                    check_out_time,
                    AttendanceStatus.CHECKED_OUT.value,
                    int(attendance_id),
                    AttendanceStatus.CHECKED_IN.value,
                    AttendanceStatus.WFH.value,
                ),
            )
            return cur.rowcount > 0

    def list_for_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY attendance_date DESC
                """,
                (int(user_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.attendance_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if user_id is not None:
            clauses.append("ar.user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ar.user_id, u.username, ar.attendance_date, ar.status
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                WHERE {where}
                ORDER BY ar.user_id ASC, ar.attendance_date ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    user_id=int(r["user_id"]),
                    username=r["username"],
                    attendance_date=normalize_mysql_date(r["attendance_date"]),
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
