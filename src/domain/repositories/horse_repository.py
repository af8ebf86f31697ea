"""Horse repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.horse import Horse


class IHorseRepository(Protocol):
    """Repository interface for Horse entities."""

    async def get(self, id: UUID) -> Horse:
        """Get a horse by ID. Raises HorseNotFoundError."""
        ...

    async def list_for_owner(self, owner_id: UUID) -> list[Horse]:
        """Get all horses of an owner, newest first."""
        ...

    async def create(self, horse: Horse) -> Horse:
        """Insert a horse and return it with its datastore-assigned id."""
        ...

    async def update(self, horse: Horse) -> Horse:
        """Update a horse, guarded by both id and owner."""
        ...

    async def set_photo(self, id: UUID, owner_id: UUID, path: str | None) -> Horse:
        """Point the horse at a new photo object."""
        ...

    async def delete(self, id: UUID, owner_id: UUID) -> None:
        """Hard-delete a horse."""
        ...
