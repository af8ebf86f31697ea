"""Address repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.address import Address, AddressDraft, AddressSummary


class IAddressRepository(Protocol):
    """Repository interface for Address entities."""

    async def get(self, id: UUID) -> Address:
        """Get an address by ID. Raises AddressNotFoundError."""
        ...

    async def find_candidates(
        self, created_by: UUID, draft: AddressDraft, limit: int
    ) -> list[Address]:
        """Loose, bounded pre-filter of the user's addresses resembling the draft."""
        ...

    async def create(self, address: Address) -> Address:
        """Insert an address."""
        ...

    async def get_many(self, ids: list[UUID]) -> list[AddressSummary]:
        """Batched lookup by id."""
        ...
