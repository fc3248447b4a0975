from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from .model import AttendanceToken


class AttendanceTokenRepository(Protocol):
    def get_active_for_update(self, raw_token: str) -> Optional[AttendanceToken]:
        """Return the unused token matching ``raw_token`` and lock it until commit."""

        raise NotImplementedError

    def create(self, *, raw_token: str, user_id: int, token_date: date, expires_at: datetime) -> AttendanceToken:
        raise NotImplementedError

    def invalidate_active(self, *, user_id: int, token_date: date) -> int:
        """Mark every unused token of the user/day as used; returns how many."""

        raise NotImplementedError

    def mark_used(self, token_id: int) -> bool:
        """Flip used false -> true. False when someone else already consumed it."""

        raise NotImplementedError

    def delete_expired_before(self, moment: datetime) -> int:
        raise NotImplementedError
