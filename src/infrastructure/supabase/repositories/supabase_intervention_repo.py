"""Supabase implementation of the Intervention repository."""

from uuid import UUID

from supabase import AsyncClient

from domain.entities.intervention import InterventionSummary
from infrastructure.supabase.client import select_by_ids
from infrastructure.supabase.rows import parse_rows


class SupabaseInterventionRepository:
    """Supabase implementation of IInterventionRepository."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def get_many(self, ids: list[UUID]) -> list[InterventionSummary]:
        rows = await select_by_ids(self._client, "interventions", "id,title", ids)
        return parse_rows(InterventionSummary, rows)
