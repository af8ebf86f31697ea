"""Authentication and current-user API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.auth import Credentials, ProfileResponse, SessionResponse
from api.v1.schemas.common import MessageResponse
from core.rate_limit import limiter
from domain.entities.session import AuthSession
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/auth", tags=["auth"])
me_router = APIRouter(prefix="/me", tags=["auth"])


def _session_response(session: AuthSession) -> SessionResponse:
    return SessionResponse(
        user_id=session.user.id,
        email=session.user.email,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
    )


@router.post(
    "/sign-up",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
@limiter.limit("5/minute")  # type: ignore[untyped-decorator]
async def sign_up(
    request: Request,
    body: Credentials,
    service: ProfileService = Depends(get_profile_service),
) -> SessionResponse:
    """Register with email and password. The token is null until the email is confirmed."""
    session = await service.sign_up(body.email, body.password)
    return _session_response(session)


@router.post(
    "/sign-in",
    response_model=SessionResponse,
    summary="Sign in",
    responses={401: {"description": "Invalid email or password"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def sign_in(
    request: Request,
    body: Credentials,
    service: ProfileService = Depends(get_profile_service),
) -> SessionResponse:
    session = await service.sign_in(body.email, body.password)
    return _session_response(session)


@router.post("/sign-out", response_model=MessageResponse, summary="Sign out")
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def sign_out(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> MessageResponse:
    await service.sign_out(user.access_token)
    return MessageResponse(message="Signed out")


@me_router.get("", response_model=ProfileResponse, summary="My profile")
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_me(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    profile = await service.me(user.id, user.access_token)
    return ProfileResponse(
        id=profile.id,
        email=profile.email,
        display_name=profile.display_name,
        role=profile.role,
        is_admin=profile.is_admin,
        created_at=profile.created_at,
    )
