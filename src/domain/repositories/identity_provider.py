"""Identity provider protocol (sign-in, sign-up, sign-out)."""

from typing import Protocol

from domain.entities.session import AuthSession, AuthUser


class IIdentityProvider(Protocol):
    """Password-based identity operations of the gateway."""

    async def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    async def sign_up(self, email: str, password: str) -> AuthSession:
        ...

    async def sign_out(self, access_token: str) -> None:
        ...

    async def get_user(self, access_token: str) -> AuthUser | None:
        ...
