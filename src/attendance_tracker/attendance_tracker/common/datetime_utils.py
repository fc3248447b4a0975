from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Protocol


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time (the single canonical server timezone).

    Truncated to whole seconds to match the DATETIME columns.
    """
    return datetime.now().replace(microsecond=0)


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        raise NotImplementedError


class SystemClock:
    def now(self) -> datetime:
        return now_local()

    def today(self) -> date:
        return now_local().date()


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, moment: Optional[datetime] = None):
        self._moment = moment or now_local()

    def now(self) -> datetime:
        return self._moment

    def today(self) -> date:
        return self._moment.date()

    def set(self, moment: datetime) -> None:
        self._moment = moment

    def advance(self, **kwargs: float) -> datetime:
        self._moment = self._moment + timedelta(**kwargs)
        return self._moment
