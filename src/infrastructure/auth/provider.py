"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """The caller, as described by a validated access token.

    ``access_token`` is the raw token; it is forwarded to the gateway so
    that row-level security sees the same user.
    """

    id: UUID
    email: str
    access_token: str = ""
    display_name: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the token's user, or None when the token is invalid or expired."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Sign a token for a user (local and test use)."""
        ...
