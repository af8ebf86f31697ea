"""Movement service: history with enrichment, and new manual movements."""

import asyncio
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import AccessDeniedError, ValidationError
from domain.entities.address import AddressDraft
from domain.entities.movement import (
    EnrichedMovement,
    Movement,
    MovementDestination,
    MovementFormContext,
    TransportMode,
)
from domain.repositories.data_context import IDataContext
from domain.services.address_service import AddressService
from domain.services.join_resolver import Relation, resolve_relations

logger = structlog.get_logger()

EXTERNAL_ADDRESS_FIELDS = ("label", "line1", "postal_code", "city", "country")


def movement_relations(ctx: IDataContext) -> list[Relation[Movement, object]]:
    """The four lookups that label a movement for display."""
    return [
        Relation("professional", lambda m: m.professional_id, ctx.professionals.get_many),
        Relation("to_address", lambda m: m.to_address_id, ctx.addresses.get_many),
        Relation("from_address", lambda m: m.from_address_id, ctx.addresses.get_many),
        Relation("intervention", lambda m: m.intervention_id, ctx.interventions.get_many),
    ]


class MovementService:
    """Service layer for horse movements."""

    def __init__(
        self,
        context_factory: Callable[[], IDataContext],
        address_service: AddressService | None = None,
    ) -> None:
        self._context_factory = context_factory
        self._addresses = address_service or AddressService(context_factory)

    async def list_for_horse(self, horse_id: UUID) -> list[EnrichedMovement]:
        """A horse's movements, latest first, with their references resolved.

        A failed lookup of one reference kind marks those references as
        failed instead of failing the whole listing.
        """
        async with self._context_factory() as ctx:
            movements = await ctx.movements.list_for_horse(horse_id)
            links = await resolve_relations(movements, movement_relations(ctx))
        return [
            EnrichedMovement(
                movement=movement,
                professional=row["professional"],
                to_address=row["to_address"],
                from_address=row["from_address"],
                intervention=row["intervention"],
            )
            for movement, row in zip(movements, links)
        ]

    async def form_context(self, horse_id: UUID) -> MovementFormContext:
        """Departure place and candidate destinations for a new movement."""
        async with self._context_factory() as ctx:
            from_address_id, professionals = await asyncio.gather(
                ctx.locations.current_detention_address_id(horse_id),
                ctx.professionals.list_with_address(),
            )
        return MovementFormContext(from_address_id=from_address_id, professionals=professionals)

    async def create(
        self,
        actor_id: UUID | None,
        horse_id: UUID,
        destination: MovementDestination,
        start_at: datetime,
        return_at: datetime | None = None,
        reason: str | None = None,
        transport: TransportMode = TransportMode.UNKNOWN,
    ) -> Movement:
        """Record a manual movement.

        The departure is the horse's current detention place (None when
        unknown). A return earlier than the departure is recorded as given.
        """
        if actor_id is None:
            raise AccessDeniedError("You must be logged in")
        self._validate_destination(destination)

        async with self._context_factory() as ctx:
            from_address_id = await ctx.locations.current_detention_address_id(horse_id)

            professional_id = destination.professional_id
            if professional_id is not None:
                professional = await ctx.professionals.get(professional_id)
                if professional.address_id is None:
                    raise ValidationError(
                        "The selected professional has no address", field="professional_id"
                    )
                to_address_id = professional.address_id
            else:
                resolution = await self._addresses.resolve(ctx, actor_id, destination.address)  # type: ignore[arg-type]
                to_address_id = resolution.address_id

            movement = Movement(
                horse_id=horse_id,
                from_address_id=from_address_id,
                to_address_id=to_address_id,
                professional_id=professional_id,
                start_at=start_at,
                return_at=return_at,
                reason=(reason or "").strip() or None,
                transport=transport,
                manual=True,
                created_by=actor_id,
            )
            if movement.returns_before_start:
                logger.warning(
                    "movement_return_before_start",
                    horse_id=str(horse_id),
                    start_at=start_at.isoformat(),
                    return_at=return_at.isoformat() if return_at else None,
                )
            created = await ctx.movements.create(movement)

        logger.info("movement_created", horse_id=str(horse_id), movement_id=str(created.id))
        return created

    @staticmethod
    def _validate_destination(destination: MovementDestination) -> None:
        if (destination.professional_id is None) == (destination.address is None):
            raise ValidationError(
                "Choose either a professional or an external address", field="destination"
            )
        address: AddressDraft | None = destination.address
        if address is None:
            return
        for name in EXTERNAL_ADDRESS_FIELDS:
            if not (getattr(address, name) or "").strip():
                raise ValidationError(f"Address field '{name}' is required", field=name)
