import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import UserNotFoundError
from src.attendance_tracker.attendance_tracker.users.service import UserDirectory


def test_directory_lists_only_active_users(users_repo):
    directory = UserDirectory(users_repo)
    assert directory.list_active_user_ids() == [1, 2]


def test_directory_lookup(users_repo):
    directory = UserDirectory(users_repo)

    assert directory.require(2).username == "bob"
    assert directory.user_exists(3) is True
    assert directory.user_exists(9) is False

    with pytest.raises(UserNotFoundError):
        directory.require(9)
    with pytest.raises(UserNotFoundError):
        directory.require(None)
