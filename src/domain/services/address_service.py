"""Address service: normalized find-or-create."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import AccessDeniedError, UniqueViolationError, ValidationError
from domain.entities.address import Address, AddressDraft, AddressResolution
from domain.repositories.data_context import IDataContext

logger = structlog.get_logger()


class AddressService:
    """Reuses an equivalent address of the user instead of inserting a duplicate."""

    def __init__(
        self,
        context_factory: Callable[[], IDataContext],
        candidate_limit: int = settings.address_candidate_limit,
    ) -> None:
        self._context_factory = context_factory
        self._candidate_limit = candidate_limit

    async def get(self, address_id: UUID) -> Address:
        async with self._context_factory() as ctx:
            return await ctx.addresses.get(address_id)

    async def find_or_create(self, user_id: UUID | None, draft: AddressDraft) -> AddressResolution:
        """Resolve a draft to an address id in a fresh data context."""
        async with self._context_factory() as ctx:
            return await self.resolve(ctx, user_id, draft)

    async def resolve(
        self, ctx: IDataContext, user_id: UUID | None, draft: AddressDraft
    ) -> AddressResolution:
        """Resolve a draft within an existing data context.

        Called by other services that already hold a context. Two addresses
        are the same when line1, line2, postal code, city and country are
        equal after normalization.
        """
        if user_id is None:
            raise AccessDeniedError("You must be logged in")
        self.validate(draft)

        match = await self._find_match(ctx, user_id, draft)
        if match is not None:
            logger.debug("address_reused", address_id=str(match))
            return AddressResolution(address_id=match, created=False)

        try:
            created = await ctx.addresses.create(draft.to_address(user_id))
        except UniqueViolationError:
            # A concurrent request inserted the same address first
            match = await self._find_match(ctx, user_id, draft)
            if match is None:
                raise
            logger.info("address_reused_after_conflict", address_id=str(match))
            return AddressResolution(address_id=match, created=False)

        logger.info("address_created", address_id=str(created.id))
        return AddressResolution(address_id=created.id, created=True)  # type: ignore[arg-type]

    @staticmethod
    def validate(draft: AddressDraft) -> None:
        missing = draft.missing_fields()
        if missing:
            raise ValidationError(f"Address field '{missing[0]}' is required", field=missing[0])

    async def _find_match(
        self, ctx: IDataContext, user_id: UUID, draft: AddressDraft
    ) -> UUID | None:
        candidates = await ctx.addresses.find_candidates(user_id, draft, self._candidate_limit)
        wanted = draft.normalized_key()
        for candidate in candidates:
            if candidate.normalized_key() == wanted:
                return candidate.id
        return None
