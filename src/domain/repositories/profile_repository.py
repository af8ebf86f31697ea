"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for user profiles."""

    async def get(self, id: UUID) -> Profile:
        """Get a profile. Raises ProfileNotFoundError."""
        ...

    async def upsert(self, id: UUID, email: str) -> None:
        """Create or refresh the profile mirroring an auth user."""
        ...
