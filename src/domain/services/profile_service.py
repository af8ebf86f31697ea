"""Identity service: password sign-in/sign-up and the caller's profile."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from uuid import UUID

import structlog

from core.exceptions import ProfileNotFoundError, ValidationError
from domain.entities.profile import Profile
from domain.entities.session import AuthSession
from domain.repositories.data_context import IDataContext
from domain.repositories.identity_provider import IIdentityProvider

logger = structlog.get_logger()


class ProfileService:
    """Signs users in and out and keeps their profile row in sync.

    ``context_factory`` takes the access token the data context should act
    with; right after sign-in that is the freshly issued token.
    """

    def __init__(
        self,
        identity_factory: Callable[[], AbstractAsyncContextManager[IIdentityProvider]],
        context_factory: Callable[[str | None], IDataContext],
    ) -> None:
        self._identity_factory = identity_factory
        self._context_factory = context_factory

    async def sign_in(self, email: str, password: str) -> AuthSession:
        email = self._validate_credentials(email, password)
        async with self._identity_factory() as identity:
            session = await identity.sign_in(email, password)
        await self._sync_profile(session)
        logger.info("user_signed_in", user_id=str(session.user.id))
        return session

    async def sign_up(self, email: str, password: str) -> AuthSession:
        """Register; the profile is written once a session token exists."""
        email = self._validate_credentials(email, password)
        async with self._identity_factory() as identity:
            session = await identity.sign_up(email, password)
        await self._sync_profile(session)
        logger.info(
            "user_signed_up",
            user_id=str(session.user.id),
            confirmation_pending=session.access_token is None,
        )
        return session

    async def sign_out(self, access_token: str) -> None:
        async with self._identity_factory() as identity:
            await identity.sign_out(access_token)
        logger.info("user_signed_out")

    async def me(self, user_id: UUID, access_token: str) -> Profile:
        """The caller's profile, including the role."""
        async with self._context_factory(access_token) as ctx:
            return await ctx.profiles.get(user_id)

    async def is_admin(self, user_id: UUID, access_token: str) -> bool:
        """True when the user's profile has the admin role; no profile means no."""
        try:
            profile = await self.me(user_id, access_token)
        except ProfileNotFoundError:
            return False
        return profile.is_admin

    async def _sync_profile(self, session: AuthSession) -> None:
        if not session.access_token:
            return
        async with self._context_factory(session.access_token) as ctx:
            await ctx.profiles.upsert(session.user.id, session.user.email)

    @staticmethod
    def _validate_credentials(email: str, password: str) -> str:
        cleaned = (email or "").strip()
        if not cleaned or "@" not in cleaned:
            raise ValidationError("A valid email is required", field="email")
        if not password:
            raise ValidationError("Password is required", field="password")
        return cleaned
