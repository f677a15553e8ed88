from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an office account (employee or administrator)."""

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    designation: Optional[str] = None
    is_active: bool = True
