from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Domain entity: a user as seen by the attendance core.

    Note: Owned by the identity service; attendance rows only reference ``user_id``.
    """

    user_id: int
    username: str
    full_name: str
    is_active: bool = True
    created_at: Optional[datetime] = None
