"""Professional directory API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import IsAdmin, get_professional_service
from api.v1.schemas.address import AddressResponse
from api.v1.schemas.professional import (
    HorseLinkResponse,
    ProfessionalCreate,
    ProfessionalCreationResponse,
    ProfessionalDetail,
    ProfessionalDetailResponse,
    ProfessionalListResponse,
    ProfessionalResponse,
    ProfessionalUpdate,
)
from core.rate_limit import limiter
from domain.entities.address import AddressDraft
from domain.entities.professional import Professional, ProfessionalDraft, ProfessionKind
from domain.services.professional_service import ProfessionalService

router = APIRouter(prefix="/professionals", tags=["professionals"])


def professional_to_response(professional: Professional) -> ProfessionalResponse:
    return ProfessionalResponse.model_validate(professional, from_attributes=True)


@router.get("", response_model=ProfessionalListResponse, summary="Search the directory")
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def search_professionals(
    request: Request,
    user: CurrentUser,
    q: str | None = Query(None, max_length=100, description="Matches name, company, email or phone"),
    kind: ProfessionKind | None = Query(None),
    service: ProfessionalService = Depends(get_professional_service),
) -> ProfessionalListResponse:
    professionals = await service.search(q, kind)
    return ProfessionalListResponse(data=[professional_to_response(p) for p in professionals])


@router.post(
    "",
    response_model=ProfessionalCreationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a professional",
    responses={
        200: {"description": "An equivalent professional already exists"},
        201: {"description": "Professional created"},
        409: {"description": "Duplicate that cannot be read back"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_professional(
    request: Request,
    response: Response,
    body: ProfessionalCreate,
    user: CurrentUser,
    service: ProfessionalService = Depends(get_professional_service),
) -> ProfessionalCreationResponse:
    """Create a professional, or point at the existing one with the same email or phone."""
    address = AddressDraft(**body.address.model_dump()) if body.address else None
    result = await service.create(
        user.id,
        ProfessionalDraft(
            display_name=body.display_name,
            kind=body.kind,
            company_name=body.company_name,
            email=body.email,
            phone=body.phone,
            website=body.website,
            notes=body.notes,
            address=address,
        ),
    )
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return ProfessionalCreationResponse(
        professional_id=result.professional_id,
        created=result.created,
        location=f"{request.url.path.rstrip('/')}/{result.professional_id}",
    )


@router.get(
    "/{professional_id}",
    response_model=ProfessionalDetailResponse,
    summary="Get a professional",
    responses={404: {"description": "Professional not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_professional(
    request: Request,
    professional_id: UUID,
    user: CurrentUser,
    service: ProfessionalService = Depends(get_professional_service),
) -> ProfessionalDetailResponse:
    """A professional with its address and the horses linked to it."""
    detail = await service.get(professional_id)
    base = professional_to_response(detail.professional)
    return ProfessionalDetailResponse(
        data=ProfessionalDetail(
            **base.model_dump(),
            address=(
                AddressResponse.model_validate(detail.address, from_attributes=True)
                if detail.address
                else None
            ),
            linked_horses=[
                HorseLinkResponse(id=horse.id, name=horse.name) for horse in detail.linked_horses
            ],
        )
    )


@router.patch(
    "/{professional_id}",
    response_model=ProfessionalDetailResponse,
    summary="Update a professional",
    responses={
        403: {"description": "Neither the creator nor an administrator"},
        404: {"description": "Professional not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_professional(
    request: Request,
    professional_id: UUID,
    body: ProfessionalUpdate,
    user: CurrentUser,
    is_admin: IsAdmin,
    service: ProfessionalService = Depends(get_professional_service),
) -> ProfessionalDetailResponse:
    address = AddressDraft(**body.address.model_dump()) if body.address else None
    professional = await service.update(
        professional_id,
        user.id,
        is_admin,
        display_name=body.display_name,
        kind=body.kind,
        company_name=body.company_name,
        email=body.email,
        phone=body.phone,
        website=body.website,
        notes=body.notes,
        is_verified=body.is_verified,
        address=address,
        clear_address=body.clear_address,
    )
    return ProfessionalDetailResponse(
        data=ProfessionalDetail(**professional_to_response(professional).model_dump())
    )


@router.delete(
    "/{professional_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a professional",
    responses={403: {"description": "Neither the creator nor an administrator"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_professional(
    request: Request,
    professional_id: UUID,
    user: CurrentUser,
    is_admin: IsAdmin,
    service: ProfessionalService = Depends(get_professional_service),
) -> None:
    await service.delete(professional_id, user.id, is_admin)
