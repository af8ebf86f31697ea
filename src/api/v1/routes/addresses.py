"""Address API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_address_service
from api.v1.schemas.address import (
    AddressDetailResponse,
    AddressResolutionResponse,
    AddressResponse,
)
from api.v1.schemas.common import AddressInput
from core.rate_limit import limiter
from domain.entities.address import AddressDraft
from domain.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])


@router.post(
    "/resolve",
    response_model=AddressResolutionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Find or create an address",
    responses={
        200: {"description": "An equivalent address already existed"},
        201: {"description": "Address created"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def resolve_address(
    request: Request,
    response: Response,
    body: AddressInput,
    user: CurrentUser,
    service: AddressService = Depends(get_address_service),
) -> AddressResolutionResponse:
    """Reuse one of my addresses that matches after normalization, else insert it."""
    resolution = await service.find_or_create(user.id, AddressDraft(**body.model_dump()))
    if not resolution.created:
        response.status_code = status.HTTP_200_OK
    return AddressResolutionResponse(address_id=resolution.address_id, created=resolution.created)


@router.get(
    "/{address_id}",
    response_model=AddressDetailResponse,
    summary="Get an address",
    responses={404: {"description": "Address not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_address(
    request: Request,
    address_id: UUID,
    user: CurrentUser,
    service: AddressService = Depends(get_address_service),
) -> AddressDetailResponse:
    address = await service.get(address_id)
    return AddressDetailResponse(data=AddressResponse.model_validate(address, from_attributes=True))
