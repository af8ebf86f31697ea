"""Identity values returned by the gateway's auth API."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class AuthUser:
    """The authenticated user as reported by the gateway."""

    id: UUID
    email: str


@dataclass(frozen=True, slots=True)
class AuthSession:
    """A signed-in session.

    ``access_token`` is None after a sign-up that still awaits email
    confirmation.
    """

    user: AuthUser
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
