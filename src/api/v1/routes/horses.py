"""Horse API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_horse_service
from api.v1.schemas.horse import (
    HorseCreate,
    HorseDetailResponse,
    HorseListResponse,
    HorseResponse,
    HorseUpdate,
)
from core.rate_limit import limiter
from domain.entities.horse import Horse
from domain.services.horse_service import HorseService

router = APIRouter(prefix="/horses", tags=["horses"])


def _to_response(horse: Horse, photo_url: str | None = None) -> HorseResponse:
    return HorseResponse(
        id=horse.id,  # type: ignore[arg-type]
        owner_id=horse.owner_id,
        name=horse.name,
        birthdate=horse.birthdate,
        sex=horse.sex,
        sire_number=horse.sire_number,
        photo_url=photo_url,
        created_at=horse.created_at,
    )


@router.get("", response_model=HorseListResponse, summary="List my horses")
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_horses(
    request: Request,
    user: CurrentUser,
    service: HorseService = Depends(get_horse_service),
) -> HorseListResponse:
    """Horses owned by the authenticated user, newest first."""
    horses = await service.list_for_owner(user.id)
    return HorseListResponse(data=[_to_response(horse) for horse in horses])


@router.post(
    "",
    response_model=HorseDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a horse",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_horse(
    request: Request,
    body: HorseCreate,
    user: CurrentUser,
    service: HorseService = Depends(get_horse_service),
) -> HorseDetailResponse:
    horse = await service.create(
        owner_id=user.id,
        name=body.name,
        birthdate=body.birthdate,
        sex=body.sex,
        sire_number=body.sire_number,
    )
    return HorseDetailResponse(data=_to_response(horse))


@router.get(
    "/{horse_id}",
    response_model=HorseDetailResponse,
    summary="Get a horse",
    responses={404: {"description": "Horse not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_horse(
    request: Request,
    horse_id: UUID,
    user: CurrentUser,
    service: HorseService = Depends(get_horse_service),
) -> HorseDetailResponse:
    """A horse, with a signed URL to its photo valid for one hour."""
    detail = await service.get(horse_id)
    return HorseDetailResponse(data=_to_response(detail.horse, detail.photo_url))


@router.patch(
    "/{horse_id}",
    response_model=HorseDetailResponse,
    summary="Update a horse",
    responses={
        403: {"description": "Not the owner"},
        404: {"description": "Horse not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_horse(
    request: Request,
    horse_id: UUID,
    body: HorseUpdate,
    user: CurrentUser,
    service: HorseService = Depends(get_horse_service),
) -> HorseDetailResponse:
    horse = await service.update(horse_id, user.id, body.model_dump(exclude_unset=True))
    return HorseDetailResponse(data=_to_response(horse))


@router.post(
    "/{horse_id}/photo",
    response_model=HorseDetailResponse,
    summary="Upload a horse photo",
    responses={
        400: {"description": "Not an image, or larger than 5 MB"},
        403: {"description": "Not the owner"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def upload_horse_photo(
    request: Request,
    horse_id: UUID,
    user: CurrentUser,
    photo: UploadFile = File(...),
    service: HorseService = Depends(get_horse_service),
) -> HorseDetailResponse:
    """Replace the horse's photo; the response carries a fresh signed URL."""
    data = await photo.read()
    detail = await service.upload_photo(
        horse_id,
        user.id,
        data=data,
        filename=photo.filename or "photo",
        content_type=photo.content_type,
    )
    return HorseDetailResponse(data=_to_response(detail.horse, detail.photo_url))


@router.delete(
    "/{horse_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a horse",
    responses={403: {"description": "Not the owner"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_horse(
    request: Request,
    horse_id: UUID,
    user: CurrentUser,
    service: HorseService = Depends(get_horse_service),
) -> None:
    await service.delete(horse_id, user.id)
