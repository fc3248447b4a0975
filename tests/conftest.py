from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceRecord, AttendanceReportRow
from src.attendance_tracker.attendance_tracker.common.datetime_utils import FrozenClock
from src.attendance_tracker.attendance_tracker.container import wire
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import ConflictError
from src.attendance_tracker.attendance_tracker.tokens.model import AttendanceToken
from src.attendance_tracker.attendance_tracker.users.model import User


class InMemoryTransactions:
    """One global lock: every transaction is serializable.

    The outermost transaction snapshots the given stores and restores them
    when the block raises.
    """

    def __init__(self, *stores):
        self._lock = threading.RLock()
        self._stores = stores
        self._depth = 0
        self.started = 0
        self.rolled_back = 0

    @contextmanager
    def transaction(self):
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            self.started += 1
            snapshots = [store.snapshot() for store in self._stores]
            self._depth = 1
            try:
                yield
            except BaseException:
                for store, snap in zip(self._stores, snapshots):
                    store.restore(snap)
                self.rolled_back += 1
                raise
            finally:
                self._depth = 0


class InMemoryUsers:
    def __init__(self, users: list[User]):
        self.users_by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def list_active(self):
        return [u for u in sorted(self.users_by_id.values(), key=lambda u: u.user_id) if u.is_active]

    def exists(self, user_id: int) -> bool:
        return user_id in self.users_by_id


class InMemoryTokens:
    def __init__(self):
        self.by_id: dict[int, AttendanceToken] = {}
        self._id = 0

    def get_active_for_update(self, raw_token: str) -> Optional[AttendanceToken]:
        for t in self.by_id.values():
            if t.token == raw_token and not t.used:
                return t
        return None

    def create(self, *, raw_token: str, user_id: int, token_date: date, expires_at: datetime) -> AttendanceToken:
        if any(t.token == raw_token for t in self.by_id.values()):
            raise ConflictError("duplicate token")
        self._id += 1
        token = AttendanceToken(
            token_id=self._id,
            token=raw_token,
            user_id=user_id,
            token_date=token_date,
            expires_at=expires_at,
        )
        self.by_id[token.token_id] = token
        return token

    def invalidate_active(self, *, user_id: int, token_date: date) -> int:
        count = 0
        for t in list(self.by_id.values()):
            if t.user_id == user_id and t.token_date == token_date and not t.used:
                self.by_id[t.token_id] = replace(t, used=True)
                count += 1
        return count

    def mark_used(self, token_id: int) -> bool:
        t = self.by_id.get(token_id)
        if not t or t.used:
            return False
        self.by_id[token_id] = replace(t, used=True)
        return True

    def delete_expired_before(self, moment: datetime) -> int:
        expired = [tid for tid, t in self.by_id.items() if t.expires_at < moment]
        for tid in expired:
            del self.by_id[tid]
        return len(expired)

    def active_for(self, user_id: int, token_date: date) -> list[AttendanceToken]:
        return [t for t in self.by_id.values() if t.user_id == user_id and t.token_date == token_date and not t.used]

    def snapshot(self):
        return dict(self.by_id), self._id

    def restore(self, snap):
        self.by_id, self._id = dict(snap[0]), snap[1]


class InMemoryAttendance:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.by_user_date: dict[tuple[int, date], AttendanceRecord] = {}
        self.failing_users: set[int] = set()
        self._id = 0

    def add(self, *, user_id: int, attendance_date: date, status: AttendanceStatus,
            check_in_time=None, check_out_time=None, marked_by=None) -> AttendanceRecord:
        self._id += 1
        rec = AttendanceRecord(
            attendance_id=self._id,
            user_id=user_id,
            attendance_date=attendance_date,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=status,
            marked_by=marked_by,
        )
        self.by_user_date[(user_id, attendance_date)] = rec
        return rec

    def get_for_user_and_date(self, user_id: int, attendance_date: date, *, for_update: bool = False):
        return self.by_user_date.get((user_id, attendance_date))

    def exists_for_user_and_date(self, user_id: int, attendance_date: date) -> bool:
        if user_id in self.failing_users:
            raise RuntimeError("storage unavailable")
        return (user_id, attendance_date) in self.by_user_date

    def _insert(self, *, user_id, attendance_date, status, check_in_time=None, marked_by=None):
        if (user_id, attendance_date) in self.by_user_date:
            raise ConflictError("Duplicate entry for user/date")
        return self.add(
            user_id=user_id,
            attendance_date=attendance_date,
            status=status,
            check_in_time=check_in_time,
            marked_by=marked_by,
        )

    def create_checkin(self, *, user_id: int, attendance_date: date, check_in_time: datetime):
        return self._insert(
            user_id=user_id,
            attendance_date=attendance_date,
            status=AttendanceStatus.CHECKED_IN,
            check_in_time=check_in_time,
        )

    def create_absent(self, *, user_id: int, attendance_date: date, marked_by=None):
        return self._insert(
            user_id=user_id,
            attendance_date=attendance_date,
            status=AttendanceStatus.ABSENT,
            marked_by=marked_by,
        )

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        for key, rec in self.by_user_date.items():
            if rec.attendance_id != attendance_id:
                continue
            if rec.check_out_time is not None or rec.status not in (AttendanceStatus.CHECKED_IN, AttendanceStatus.WFH):
                return False
            self.by_user_date[key] = replace(rec, check_out_time=check_out_time, status=AttendanceStatus.CHECKED_OUT)
            return True
        return False

    def list_for_user(self, user_id: int):
        items = [r for r in self.by_user_date.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.attendance_date, reverse=True)
        return items

    def get_report_rows(self, *, start_date: date, end_date: date, user_id=None):
        rows = [
            AttendanceReportRow(
                user_id=r.user_id,
                username=self._users.users_by_id[r.user_id].username,
                attendance_date=r.attendance_date,
                status=r.status,
            )
            for r in self.by_user_date.values()
            if start_date <= r.attendance_date <= end_date and (user_id is None or r.user_id == user_id)
        ]
        rows.sort(key=lambda r: (r.user_id, r.attendance_date))
        return rows

    def snapshot(self):
        return dict(self.by_user_date), self._id

    def restore(self, snap):
        self.by_user_date, self._id = dict(snap[0]), snap[1]


class RecordingScheduler:
    def __init__(self):
        self.jobs: list[dict] = []
        self.started = False
        self.stopped = False

    def add_job(self, func, trigger, **kwargs):
        self.jobs.append({"func": func, "trigger": trigger, **kwargs})

    def start(self):
        self.started = True

    def shutdown(self, wait=True):
        self.stopped = True


ALICE = User(user_id=1, username="alice", full_name="Alice", created_at=datetime(2026, 3, 1, 8, 0))
BOB = User(user_id=2, username="bob", full_name="Bob", created_at=datetime(2026, 2, 1, 8, 0))
CAROL = User(user_id=3, username="carol", full_name="Carol", is_active=False)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 3, 2, 9, 0, 0))


@pytest.fixture
def users_repo():
    return InMemoryUsers([ALICE, BOB, CAROL])


@pytest.fixture
def tokens_repo():
    return InMemoryTokens()


@pytest.fixture
def attendance_repo(users_repo):
    return InMemoryAttendance(users_repo)


@pytest.fixture
def transactions(tokens_repo, attendance_repo):
    return InMemoryTransactions(tokens_repo, attendance_repo)


@pytest.fixture
def container(clock, users_repo, tokens_repo, attendance_repo, transactions):
    return wire(
        conn=transactions,
        users_repo=users_repo,
        tokens_repo=tokens_repo,
        attendance_repo=attendance_repo,
        clock=clock,
        token_ttl_minutes=5,
    )


@pytest.fixture
def service(container):
    return container.attendance_service


@pytest.fixture
def recording_scheduler():
    return RecordingScheduler()
