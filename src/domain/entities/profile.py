"""Profile domain entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

ADMIN_ROLE = "admin"
DEFAULT_ROLE = "user"


@dataclass
class Profile:
    """Domain entity for user profile (mirrors a Supabase auth user)."""

    id: UUID
    email: str = ""
    display_name: str | None = None
    role: str = DEFAULT_ROLE
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE
