from __future__ import annotations

from typing import Optional

from ..core.exceptions import UserNotFoundError
from .model import User
from .repository import UserRepository


class UserDirectory:
    """Narrow identity interface consumed by the attendance core."""

    def __init__(self, users: UserRepository):
        self._users = users

    def require(self, user_id: Optional[int]) -> User:
        if user_id is None:
            raise UserNotFoundError("User not found")
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def list_active_user_ids(self) -> list[int]:
        return [u.user_id for u in self._users.list_active()]

    def user_exists(self, user_id: int) -> bool:
        return self._users.exists(int(user_id))
