"""Password authentication through the Supabase auth client."""

from typing import Any
from uuid import UUID

from supabase import AsyncClient, AuthApiError, AuthError, AuthWeakPasswordError

from core.config import Settings, settings
from core.exceptions import AuthenticationError, ErrorCode, GatewayError, ValidationError
from domain.entities.session import AuthSession, AuthUser
from infrastructure.supabase.client import ClientFactory, create_client
from infrastructure.supabase.errors import translate_auth_error

REJECTED_CREDENTIALS = (400, 401, 422)
REJECTED_TOKEN = (401, 403, 404)


def _user(user: Any) -> AuthUser:
    if user is None:
        raise GatewayError("The auth API returned no user")
    try:
        return AuthUser(id=UUID(str(user.id)), email=user.email or "")
    except ValueError as exc:
        raise GatewayError("Malformed user returned by the auth API") from exc


def _session(response: Any) -> AuthSession:
    # Sign-up awaiting confirmation comes back without a session
    session = response.session
    return AuthSession(
        user=_user(response.user),
        access_token=session.access_token if session else None,
        refresh_token=session.refresh_token if session else None,
        expires_in=session.expires_in if session else None,
    )


class SupabaseIdentityProvider:
    """IIdentityProvider over an anonymous Supabase client."""

    def __init__(
        self,
        config: Settings = settings,
        client_factory: ClientFactory = create_client,
    ) -> None:
        self._config = config
        self._client_factory = client_factory
        self._client: AsyncClient | None = None

    async def __aenter__(self) -> "SupabaseIdentityProvider":
        self._client = await self._client_factory(None, self._config)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        self._client = None

    @property
    def client(self) -> AsyncClient:
        if self._client is None:
            raise RuntimeError("SupabaseIdentityProvider not initialized. Use as context manager.")
        return self._client

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Exchange email and password for a session."""
        try:
            response = await self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as exc:
            if exc.status in REJECTED_CREDENTIALS:
                raise AuthenticationError(
                    "Invalid email or password", error_code=ErrorCode.INVALID_CREDENTIALS
                ) from exc
            raise translate_auth_error(exc) from exc
        except AuthError as exc:
            raise translate_auth_error(exc) from exc
        return _session(response)

    async def sign_up(self, email: str, password: str) -> AuthSession:
        """Register a new user; the session has no token until email confirmation."""
        try:
            response = await self.client.auth.sign_up({"email": email, "password": password})
        except AuthWeakPasswordError as exc:
            raise ValidationError(exc.message, field="password") from exc
        except AuthApiError as exc:
            if exc.status in REJECTED_CREDENTIALS:
                raise ValidationError(exc.message, field="email") from exc
            raise translate_auth_error(exc) from exc
        except AuthError as exc:
            raise translate_auth_error(exc) from exc
        return _session(response)

    async def sign_out(self, access_token: str) -> None:
        """Revoke the sessions of the token's user."""
        try:
            await self.client.auth.admin.sign_out(access_token)
        except AuthApiError as exc:
            # An already-revoked session is signed out
            if exc.status in REJECTED_TOKEN:
                return
            raise translate_auth_error(exc) from exc
        except AuthError as exc:
            raise translate_auth_error(exc) from exc

    async def get_user(self, access_token: str) -> AuthUser | None:
        """Return the token's user, or None when the token is rejected."""
        try:
            response = await self.client.auth.get_user(access_token)
        except AuthApiError as exc:
            if exc.status in REJECTED_TOKEN:
                return None
            raise translate_auth_error(exc) from exc
        except AuthError as exc:
            raise translate_auth_error(exc) from exc
        if response is None:
            return None
        return _user(response.user)
