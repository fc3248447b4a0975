from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class AttendanceToken:
    """Domain entity: a short-lived, single-use attendance token."""

    token_id: int
    token: str
    user_id: int
    token_date: date
    expires_at: datetime
    used: bool = False

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_usable(self, now: datetime) -> bool:
        return not self.used and not self.is_expired(now)


def token_digest(raw_token: str) -> str:
    """Fixed-width lookup key for an opaque token of any length."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()
