"""Professional repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.address import AddressDraft
from domain.entities.horse import HorseSummary
from domain.entities.professional import Professional, ProfessionalSummary, ProfessionKind


class IProfessionalRepository(Protocol):
    """Repository interface for the professional directory."""

    async def get(self, id: UUID) -> Professional:
        """Get a professional by ID. Raises ProfessionalNotFoundError."""
        ...

    async def search(
        self, query: str | None = None, kind: ProfessionKind | None = None
    ) -> list[Professional]:
        """List professionals by display name, optionally filtered."""
        ...

    async def list_with_address(self) -> list[Professional]:
        """List professionals that have an address, by display name."""
        ...

    async def find_by_kind_and_email(self, kind: ProfessionKind, email: str) -> UUID | None:
        """Find a professional of this kind with this email (case-insensitive)."""
        ...

    async def find_by_kind_and_phone(self, kind: ProfessionKind, digits: str) -> UUID | None:
        """Find a professional of this kind whose phone has these digits."""
        ...

    async def create(self, professional: Professional) -> Professional:
        """Insert a professional."""
        ...

    async def create_with_address(
        self, professional: Professional, address: AddressDraft | None
    ) -> UUID:
        """Create the professional and its address in one server-side transaction."""
        ...

    async def update(self, professional: Professional) -> Professional:
        """Update a professional."""
        ...

    async def delete(self, id: UUID) -> None:
        """Delete a professional."""
        ...

    async def get_many(self, ids: list[UUID]) -> list[ProfessionalSummary]:
        """Batched lookup by id."""
        ...

    async def list_linked_horses(self, id: UUID) -> list[HorseSummary]:
        """Horses linked to this professional that the caller can see."""
        ...
