from __future__ import annotations

from datetime import date, datetime

import pytest

from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import UserNotFoundError, ValidationError
from src.attendance_tracker.attendance_tracker.reports.service import summarize

START = date(2026, 3, 1)
END = date(2026, 3, 31)


def _days(repo, user_id, statuses, first_day=1):
    for i, status in enumerate(statuses):
        repo.add(user_id=user_id, attendance_date=date(2026, 3, first_day + i), status=status)


def test_leave_excluded_from_denominator(container, attendance_repo):
    S = AttendanceStatus
    _days(attendance_repo, 1, [S.CHECKED_OUT, S.CHECKED_OUT, S.ABSENT, S.LEAVE])

    result = container.report_service.compute_percentage(1, START, END)

    assert (result.total_days, result.present_days, result.absent_days, result.leave_days) == (4, 2, 1, 1)
    assert result.percentage == 66.67
    assert result.username == "alice"


def test_all_leave_yields_zero(container, attendance_repo):
    _days(attendance_repo, 1, [AttendanceStatus.LEAVE] * 3)

    result = container.report_service.compute_percentage(1, START, END)
    assert result.percentage == 0
    assert result.leave_days == 3


def test_no_records_yields_zero_result(container):
    result = container.report_service.compute_percentage(2, START, END)
    assert result.to_dict() == {
        "user_id": 2,
        "username": "bob",
        "total_days": 0,
        "present_days": 0,
        "absent_days": 0,
        "leave_days": 0,
        "percentage": 0.0,
    }


def test_wfh_and_checked_in_count_as_present(container, attendance_repo):
    S = AttendanceStatus
    _days(attendance_repo, 1, [S.WFH, S.CHECKED_IN, S.ABSENT])

    result = container.report_service.compute_percentage(1, START, END)
    assert result.present_days == 2
    assert result.percentage == 66.67


def test_rounding_is_half_up():
    from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceReportRow

    S = AttendanceStatus
    # 1 present out of 32 days = 3.125%
    rows = [AttendanceReportRow(user_id=1, username="a", attendance_date=date(2026, 1, i + 1), status=S.ABSENT)
            for i in range(31)]
    rows.append(AttendanceReportRow(user_id=1, username="a", attendance_date=date(2026, 2, 1), status=S.CHECKED_OUT))

    assert summarize(1, "a", rows).percentage == 3.13


def test_range_respects_dates(container, attendance_repo):
    attendance_repo.add(user_id=1, attendance_date=date(2026, 2, 28), status=AttendanceStatus.ABSENT)
    attendance_repo.add(user_id=1, attendance_date=date(2026, 3, 1), status=AttendanceStatus.CHECKED_OUT)

    result = container.report_service.compute_percentage(1, START, END)
    assert result.total_days == 1
    assert result.percentage == 100.0


def test_bulk_groups_by_user(container, attendance_repo):
    S = AttendanceStatus
    _days(attendance_repo, 2, [S.ABSENT, S.CHECKED_OUT])
    _days(attendance_repo, 1, [S.CHECKED_OUT, S.LEAVE])

    results = container.report_service.compute_percentage_for_range(START, END)

    assert [r.user_id for r in results] == [1, 2]
    assert results[0].percentage == 100.0
    assert results[1].percentage == 50.0


def test_bulk_for_single_user_without_records(container):
    results = container.report_service.compute_percentage_for_range(START, END, user_id=2)
    assert len(results) == 1
    assert results[0].total_days == 0


def test_bulk_without_records_is_empty(container):
    assert container.report_service.compute_percentage_for_range(START, END) == []


def test_inverted_range_rejected(container):
    with pytest.raises(ValidationError):
        container.report_service.compute_percentage(1, END, START)


def test_unknown_user(container):
    with pytest.raises(UserNotFoundError):
        container.report_service.compute_percentage(42, START, END)


def test_my_percentage_starts_at_account_creation(container, attendance_repo, clock):
    attendance_repo.add(user_id=1, attendance_date=date(2026, 2, 20), status=AttendanceStatus.ABSENT)
    attendance_repo.add(user_id=1, attendance_date=date(2026, 3, 1), status=AttendanceStatus.CHECKED_OUT)
    attendance_repo.add(user_id=1, attendance_date=date(2026, 3, 2), status=AttendanceStatus.ABSENT)

    result = container.report_service.compute_my_percentage(1)

    # alice joined 2026-03-01; clock is 2026-03-02
    assert result.total_days == 2
    assert result.percentage == 50.0


def test_my_percentage_future_creation_date(container, users_repo, clock):
    from dataclasses import replace

    users_repo.users_by_id[1] = replace(users_repo.users_by_id[1], created_at=datetime(2027, 1, 1))
    assert container.report_service.compute_my_percentage(1).total_days == 0


def test_my_percentage_without_creation_date_covers_all_history(container, attendance_repo):
    attendance_repo.add(user_id=3, attendance_date=date(2020, 5, 4), status=AttendanceStatus.CHECKED_OUT)
    attendance_repo.add(user_id=3, attendance_date=date(2026, 3, 2), status=AttendanceStatus.ABSENT)

    result = container.report_service.compute_my_percentage(3)
    assert result.total_days == 2
    assert result.percentage == 50.0
