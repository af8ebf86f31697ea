"""Supabase implementation of the Profile repository."""

from uuid import UUID

from supabase import AsyncClient

from core.exceptions import ProfileNotFoundError, RecordNotFoundError
from domain.entities.profile import Profile
from infrastructure.supabase.client import execute
from infrastructure.supabase.rows import parse_row

TABLE = "profiles"
COLUMNS = "id,email,display_name,role,created_at,updated_at"


class SupabaseProfileRepository:
    """Supabase implementation of IProfileRepository."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def get(self, id: UUID) -> Profile:
        request = self._client.table(TABLE).select(COLUMNS).eq("id", str(id)).single()
        try:
            row = await execute(request)
        except RecordNotFoundError as exc:
            raise ProfileNotFoundError(str(id)) from exc
        return parse_row(Profile, row)

    async def upsert(self, id: UUID, email: str) -> None:
        """Create the profile, or refresh its email; the role is left untouched."""
        await execute(
            self._client.table(TABLE).upsert({"id": str(id), "email": email}, on_conflict="id")
        )
