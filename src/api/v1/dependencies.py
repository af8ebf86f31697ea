"""Dependency injection factories for API v1.

Services are built per request: every gateway call made on behalf of a
caller carries that caller's access token.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Annotated

from fastapi import Depends

from api.dependencies.auth import CurrentUser
from domain.repositories.data_context import IDataContext
from domain.repositories.identity_provider import IIdentityProvider
from domain.services.address_service import AddressService
from domain.services.horse_service import HorseService
from domain.services.movement_service import MovementService
from domain.services.professional_service import ProfessionalService
from domain.services.profile_service import ProfileService
from infrastructure.supabase.context import SupabaseDataContext
from infrastructure.supabase.identity import SupabaseIdentityProvider

TokenContextFactory = Callable[[str | None], IDataContext]
ContextFactory = Callable[[], IDataContext]


def get_token_context_factory() -> TokenContextFactory:
    """Factory for data contexts acting with a given access token."""

    def factory(access_token: str | None) -> IDataContext:
        return SupabaseDataContext(access_token)

    return factory


def get_identity_factory() -> Callable[[], AbstractAsyncContextManager[IIdentityProvider]]:
    """Factory for identity providers over the auth API."""
    return SupabaseIdentityProvider


def get_context_factory(
    user: CurrentUser,
    token_factory: TokenContextFactory = Depends(get_token_context_factory),
) -> ContextFactory:
    """Data contexts bound to the current user's token."""

    def factory() -> IDataContext:
        return token_factory(user.access_token)

    return factory


def get_address_service(
    context_factory: ContextFactory = Depends(get_context_factory),
) -> AddressService:
    return AddressService(context_factory)


def get_horse_service(
    context_factory: ContextFactory = Depends(get_context_factory),
) -> HorseService:
    return HorseService(context_factory)


def get_movement_service(
    context_factory: ContextFactory = Depends(get_context_factory),
    address_service: AddressService = Depends(get_address_service),
) -> MovementService:
    return MovementService(context_factory, address_service=address_service)


def get_professional_service(
    context_factory: ContextFactory = Depends(get_context_factory),
    address_service: AddressService = Depends(get_address_service),
) -> ProfessionalService:
    return ProfessionalService(context_factory, address_service=address_service)


def get_profile_service(
    identity_factory: Callable[[], AbstractAsyncContextManager[IIdentityProvider]] = Depends(
        get_identity_factory
    ),
    token_factory: TokenContextFactory = Depends(get_token_context_factory),
) -> ProfileService:
    return ProfileService(identity_factory, token_factory)


async def get_is_admin(
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> bool:
    """Whether the current user's profile has the admin role."""
    return await service.is_admin(user.id, user.access_token)


IsAdmin = Annotated[bool, Depends(get_is_admin)]
