"""Supabase implementation of the Horse repository."""

from uuid import UUID

from supabase import AsyncClient

from core.exceptions import HorseNotFoundError, RecordNotFoundError
from domain.entities.horse import Horse
from infrastructure.supabase.client import execute
from infrastructure.supabase.rows import Row, parse_row, to_payload

TABLE = "horses"
COLUMNS = "id,owner_id,name,birthdate,sex,sire_number,photo_url,created_at"
# The column keeps its historical name; it stores a storage path, not a URL
RENAMES = {"photo_url": "photo_path"}


class SupabaseHorseRepository:
    """Supabase implementation of IHorseRepository."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def get(self, id: UUID) -> Horse:
        request = self._client.table(TABLE).select(COLUMNS).eq("id", str(id)).single()
        try:
            row = await execute(request)
        except RecordNotFoundError as exc:
            raise HorseNotFoundError(str(id)) from exc
        return self._to_entity(row)

    async def list_for_owner(self, owner_id: UUID) -> list[Horse]:
        rows = await execute(
            self._client.table(TABLE)
            .select(COLUMNS)
            .eq("owner_id", str(owner_id))
            .order("created_at", desc=True)
        )
        return [self._to_entity(row) for row in rows]

    async def create(self, horse: Horse) -> Horse:
        payload = self._to_payload(horse)
        payload["owner_id"] = str(horse.owner_id)
        rows = await execute(self._client.table(TABLE).insert(payload))
        return self._to_entity(rows[0])

    async def update(self, horse: Horse) -> Horse:
        """Update a horse; the owner filter makes foreign rows unreachable."""
        if horse.id is None:
            raise HorseNotFoundError("")
        rows = await execute(
            self._client.table(TABLE)
            .update(self._to_payload(horse))
            .eq("id", str(horse.id))
            .eq("owner_id", str(horse.owner_id))
        )
        if not rows:
            raise HorseNotFoundError(str(horse.id))
        return self._to_entity(rows[0])

    async def set_photo(self, id: UUID, owner_id: UUID, path: str | None) -> Horse:
        rows = await execute(
            self._client.table(TABLE)
            .update({"photo_url": path})
            .eq("id", str(id))
            .eq("owner_id", str(owner_id))
        )
        if not rows:
            raise HorseNotFoundError(str(id))
        return self._to_entity(rows[0])

    async def delete(self, id: UUID, owner_id: UUID) -> None:
        await execute(
            self._client.table(TABLE).delete().eq("id", str(id)).eq("owner_id", str(owner_id))
        )

    @staticmethod
    def _to_entity(row: Row) -> Horse:
        return parse_row(Horse, row, RENAMES)

    @staticmethod
    def _to_payload(horse: Horse) -> Row:
        """Editable columns only; id, owner and timestamps are never rewritten."""
        return to_payload(
            {
                "name": horse.name,
                "birthdate": horse.birthdate,
                "sex": horse.sex,
                "sire_number": horse.sire_number,
            }
        )
