"""JWT validation for Supabase access tokens.

Supabase signs access tokens with ES256 (public keys published as a JWKS);
tokens signed locally with the shared secret (HS256) are accepted for
development and tests.

Payload fields read:
    {
        "sub": "user-uuid",
        "email": "rider@example.com",
        "role": "authenticated",
        "user_metadata": { "display_name": "Camille" },
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

import httpx
import structlog
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()

# kid -> JWK, fetched once and refreshed on an unknown kid
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys(refresh: bool = False) -> dict[str, Any]:
    """Fetch and cache the project's JWKS keys."""
    global _jwks_cache
    if _jwks_cache is not None and not refresh:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient(timeout=settings.gateway_timeout_seconds) as client:
            response = await client.get(jwks_url)
            response.raise_for_status()
            jwks_data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("jwks_fetch_failed", url=jwks_url, error=str(exc))
        return _jwks_cache or {}

    _jwks_cache = {key["kid"]: key for key in jwks_data.get("keys", []) if key.get("kid")}
    logger.info("jwks_fetched", key_count=len(_jwks_cache))
    return _jwks_cache


class JWTAuthProvider:
    """Validates Supabase (ES256) and locally-signed (HS256) access tokens."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Validate a JWT and build the TokenUser carrying it.

        The signing algorithm is read from the token header. Returns None for
        any invalid, expired or incomplete token.
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                payload = await self._decode_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if payload is None:
            return None

        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            return None

        try:
            parsed_id = UUID(user_id)
        except ValueError:
            return None

        user_metadata = payload.get("user_metadata") or {}
        display_name = (
            user_metadata.get("display_name")
            or user_metadata.get("full_name")
            or payload.get("name")
        )

        return TokenUser(
            id=parsed_id,
            email=email,
            access_token=token,
            display_name=display_name,
            role=payload.get("role"),
        )

    async def _decode_es256(self, token: str, header: dict) -> Optional[dict]:
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _get_jwks_keys()).get(kid)
        if key_data is None:
            # Key rotation
            key_data = (await _get_jwks_keys(refresh=True)).get(kid)
        if key_data is None:
            logger.warning("jwks_key_not_found", kid=kid)
            return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """Sign an HS256 token for a user (development and tests)."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)
        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "aud": "authenticated",
            "role": "authenticated",
            "exp": expire,
            "user_metadata": {"display_name": user.display_name},
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
