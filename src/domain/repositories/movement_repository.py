"""Movement repository protocols."""

from typing import Protocol
from uuid import UUID

from domain.entities.movement import Movement


class IMovementRepository(Protocol):
    """Repository interface for horse movements."""

    async def list_for_horse(self, horse_id: UUID) -> list[Movement]:
        """Get a horse's movements, latest departure first.

        Ordered by start time descending (nulls last), ties broken by
        creation time descending.
        """
        ...

    async def create(self, movement: Movement) -> Movement:
        """Insert a movement."""
        ...


class IHorseLocationRepository(Protocol):
    """Server-side lookup of where a horse currently lives."""

    async def current_detention_address_id(self, horse_id: UUID) -> UUID | None:
        """Return the horse's current detention address, None when unknown."""
        ...
