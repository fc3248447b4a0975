from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_date
from .model import AttendanceToken, token_digest
from .repository import AttendanceTokenRepository


def _to_token(row: Dict[str, Any]) -> AttendanceToken:
    return AttendanceToken(
        token_id=int(row["token_id"]),
        token=row["token"],
        user_id=int(row["user_id"]),
        token_date=normalize_mysql_date(row["token_date"]),
        expires_at=row["expires_at"],
        used=bool(row["used"]),
    )


class MySQLAttendanceTokenRepository(AttendanceTokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_for_update(self, raw_token: str) -> Optional[AttendanceToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT token_id, token, user_id, token_date, expires_at, used
                FROM attendance_tokens
                WHERE token_digest=%s AND used=0
                FOR UPDATE
                """,
                (token_digest(raw_token),),
            )
            row = fetchone(cur)
            return _to_token(row) if row else None

    def create(self, *, raw_token: str, user_id: int, token_date: date, expires_at: datetime) -> AttendanceToken:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_tokens(token_digest, token, user_id, token_date, expires_at, used)
                VALUES(%s,%s,%s,%s,%s,0)
                """,
                (token_digest(raw_token), raw_token, int(user_id), token_date, expires_at),
            )
            return AttendanceToken(
                token_id=int(cur.lastrowid),
                token=raw_token,
                user_id=int(user_id),
                token_date=token_date,
                expires_at=expires_at,
                used=False,
            )

    def invalidate_active(self, *, user_id: int, token_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_tokens
                SET used=1
                WHERE user_id=%s AND token_date=%s AND used=0
                """,
                (int(user_id), token_date),
            )
            return int(cur.rowcount)

    def mark_used(self, token_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_tokens SET used=1 WHERE token_id=%s AND used=0",
                (int(token_id),),
            )
            return cur.rowcount > 0

    def delete_expired_before(self, moment: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_tokens WHERE expires_at < %s", (moment,))
            return int(cur.rowcount)
