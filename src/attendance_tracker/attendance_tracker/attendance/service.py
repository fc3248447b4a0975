from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_TOKEN_TTL_MINUTES
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyMarkedError,
    AttendanceCompleteError,
    ConflictError,
    InvalidTokenError,
    TokenExpiredError,
    ValidationError,
)
from ..database.connection import TransactionManager
from ..tokens.model import AttendanceToken
from ..tokens.repository import AttendanceTokenRepository
from ..users.service import UserDirectory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Token issuing and scan resolution.

    A day moves NO_RECORD -> CHECKED_IN -> CHECKED_OUT, one step per consumed
    token. ABSENT and LEAVE rows (written by the reconciler or HR) are closed
    days: scanning a token for them fails with AttendanceCompleteError.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        tokens: AttendanceTokenRepository,
        users: UserDirectory,
        transactions: TransactionManager,
        *,
        clock: Optional[Clock] = None,
        token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES,
    ):
        self._attendance = attendance
        self._tokens = tokens
        self._users = users
        self._transactions = transactions
        self._clock = clock or SystemClock()
        self._token_ttl = timedelta(minutes=int(token_ttl_minutes))

    def issue_token(self, user_id: int, raw_token: str) -> AttendanceToken:
        raw_token = require_non_empty(raw_token, "token")
        user = self._users.require(user_id)

        now = self._clock.now()
        today = self._clock.today()

        with self._transactions.transaction():
            record = self._attendance.get_for_user_and_date(user.user_id, today, for_update=True)
            if record and record.is_day_complete:
                raise AlreadyMarkedError("Attendance already marked for today")

            invalidated = self._tokens.invalidate_active(user_id=user.user_id, token_date=today)
            token = self._tokens.create(
                raw_token=raw_token,
                user_id=user.user_id,
                token_date=today,
                expires_at=now + self._token_ttl,
            )

        logger.info(
            "Issued attendance token for %s (day=%s, expires=%s, invalidated=%d)",
            user.username, today, token.expires_at, invalidated,
        )
        return token

    def resolve_scan(self, raw_token: str) -> AttendanceRecord:
        raw_token = require_non_empty(raw_token, "token")

        with self._transactions.transaction():
            token = self._tokens.get_active_for_update(raw_token)
            if token is None:
                logger.warning("Rejected scan: unknown or used token")
                raise InvalidTokenError("Invalid or used QR token")

            now = self._clock.now()
            if token.is_expired(now):
                logger.warning("Rejected scan: token %s expired at %s", token.token_id, token.expires_at)
                raise TokenExpiredError("QR token expired")

            # The token authorizes the day it was issued for, not the scan day.
            day = token.token_date
            record = self._attendance.get_for_user_and_date(token.user_id, day, for_update=True)

            if record is None:
                action = "check-in"
            elif not record.is_day_complete:
                if record.check_in_time is not None and now < record.check_in_time:
                    raise ValidationError("Check-out time cannot be before check-in time")
                action = "check-out"
            else:
                logger.warning("Rejected scan: day %s already closed for user %s", day, token.user_id)
                raise AttendanceCompleteError("Attendance already completed")

            if not self._tokens.mark_used(token.token_id):
                raise InvalidTokenError("Invalid or used QR token")

            if record is None:
                record = self._attendance.create_checkin(
                    user_id=token.user_id,
                    attendance_date=day,
                    check_in_time=now,
                )
            else:
                if not self._attendance.update_checkout(attendance_id=record.attendance_id, check_out_time=now):
                    raise ConflictError("Attendance was updated concurrently")
                record = replace(record, check_out_time=now, status=AttendanceStatus.CHECKED_OUT)

        logger.info("Attendance marked for user %s (%s, day=%s)", token.user_id, action, day)
        return record

    def list_my_attendance(self, user_id: int) -> Sequence[AttendanceRecord]:
        user = self._users.require(user_id)
        return list(self._attendance.list_for_user(user.user_id))

    def purge_expired_tokens(self) -> int:
        removed = self._tokens.delete_expired_before(self._clock.now())
        if removed:
            logger.info("Purged %d expired attendance tokens", removed)
        return removed
