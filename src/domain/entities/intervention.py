"""Intervention projection (care events recorded elsewhere)."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class InterventionSummary:
    """Projection of an intervention used to label movements."""

    id: UUID
    title: str | None = None
