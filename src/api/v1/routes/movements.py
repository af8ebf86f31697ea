"""Movement API routes, nested under a horse."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_movement_service
from api.v1.routes.professionals import professional_to_response
from api.v1.schemas.common import AddressSummaryResponse
from api.v1.schemas.movement import (
    InterventionTitleResponse,
    LinkResponse,
    MovementCreate,
    MovementCreatedResponse,
    MovementDetailResponse,
    MovementFormContextResponse,
    MovementListResponse,
    MovementResponse,
    ProfessionalNameResponse,
)
from core.rate_limit import limiter
from domain.entities.address import AddressDraft
from domain.entities.link import Link
from domain.entities.movement import EnrichedMovement, MovementDestination
from domain.services.movement_service import MovementService

router = APIRouter(prefix="/horses/{horse_id}/movements", tags=["movements"])


def _link(link: Link, schema: type) -> LinkResponse:  # type: ignore[type-arg]
    value = schema.model_validate(link.value, from_attributes=True) if link.value else None
    return LinkResponse(id=link.id, status=link.status, value=value)


def _to_response(item: EnrichedMovement) -> MovementResponse:
    movement = item.movement
    return MovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        horse_id=movement.horse_id,
        title=item.title,
        start_at=movement.start_at,
        return_at=movement.return_at,
        reason=movement.reason,
        transport=movement.transport,
        manual=movement.manual,
        created_at=movement.created_at,
        professional=_link(item.professional, ProfessionalNameResponse),
        to_address=_link(item.to_address, AddressSummaryResponse),
        from_address=_link(item.from_address, AddressSummaryResponse),
        intervention=_link(item.intervention, InterventionTitleResponse),
    )


@router.get("", response_model=MovementListResponse, summary="List a horse's movements")
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_movements(
    request: Request,
    horse_id: UUID,
    user: CurrentUser,
    service: MovementService = Depends(get_movement_service),
) -> MovementListResponse:
    """Latest departure first. Each reference carries a resolution status."""
    movements = await service.list_for_horse(horse_id)
    return MovementListResponse(data=[_to_response(item) for item in movements])


@router.get(
    "/form-context",
    response_model=MovementFormContextResponse,
    summary="Data needed to record a movement",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def movement_form_context(
    request: Request,
    horse_id: UUID,
    user: CurrentUser,
    service: MovementService = Depends(get_movement_service),
) -> MovementFormContextResponse:
    """Current detention address and the professionals that have an address."""
    context = await service.form_context(horse_id)
    return MovementFormContextResponse(
        from_address_id=context.from_address_id,
        professionals=[professional_to_response(p) for p in context.professionals],
    )


@router.post(
    "",
    response_model=MovementDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a movement",
    responses={400: {"description": "Invalid destination"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_movement(
    request: Request,
    horse_id: UUID,
    body: MovementCreate,
    user: CurrentUser,
    service: MovementService = Depends(get_movement_service),
) -> MovementDetailResponse:
    address = None
    if body.external_address is not None:
        address = AddressDraft(**body.external_address.model_dump())
    movement = await service.create(
        actor_id=user.id,
        horse_id=horse_id,
        destination=MovementDestination(professional_id=body.professional_id, address=address),
        start_at=body.start_at,
        return_at=body.return_at,
        reason=body.reason,
        transport=body.transport,
    )
    return MovementDetailResponse(
        data=MovementCreatedResponse(
            id=movement.id,  # type: ignore[arg-type]
            horse_id=movement.horse_id,
            from_address_id=movement.from_address_id,
            to_address_id=movement.to_address_id,
            professional_id=movement.professional_id,
            start_at=movement.start_at,
            return_at=movement.return_at,
            reason=movement.reason,
            transport=movement.transport,
            manual=movement.manual,
        )
    )
