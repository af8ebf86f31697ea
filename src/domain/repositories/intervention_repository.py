"""Intervention repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.intervention import InterventionSummary


class IInterventionRepository(Protocol):
    """Read-only access to interventions referenced by movements."""

    async def get_many(self, ids: list[UUID]) -> list[InterventionSummary]:
        """Batched lookup by id."""
        ...
