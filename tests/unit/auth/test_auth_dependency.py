"""Unit tests for the authentication dependencies and the token they forward."""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from jose import jwt

from api.dependencies.auth import CurrentUser, OptionalUser, get_auth_provider
from api.exception_handlers import setup_exception_handlers
from api.v1.dependencies import ContextFactory, get_context_factory, get_token_context_factory
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

SECRET = "test-secret"


def _claims(**overrides) -> dict:
    claims = {
        "sub": str(uuid4()),
        "email": "rider@example.com",
        "aud": "authenticated",
        "role": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        "user_metadata": {"full_name": "Camille Martin"},
    }
    claims.update(overrides)
    return claims


@pytest.fixture
def provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key=SECRET, algorithm="HS256", expire_minutes=30)


@pytest.fixture
def forwarded() -> list[str | None]:
    """Tokens handed to the data context factory."""
    return []


@pytest.fixture
async def http(
    provider: JWTAuthProvider, forwarded: list[str | None]
) -> AsyncGenerator[AsyncClient, None]:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/me")
    async def me(user: CurrentUser) -> dict:
        return {"id": str(user.id), "display_name": user.display_name, "role": user.role}

    @app.get("/maybe-me")
    async def maybe_me(user: OptionalUser) -> dict:
        return {"anonymous": user is None}

    @app.get("/records")
    async def records(context_factory: ContextFactory = Depends(get_context_factory)) -> dict:
        context_factory()
        return {}

    def token_factory():  # type: ignore[no-untyped-def]
        def factory(access_token: str | None) -> object:
            forwarded.append(access_token)
            return object()

        return factory

    app.dependency_overrides[get_auth_provider] = lambda: provider
    app.dependency_overrides[get_token_context_factory] = token_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_missing_token_asks_for_a_bearer(self, http: AsyncClient):
        response = await http.get("/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        body = response.json()
        assert body["error_code"] == "UNAUTHORIZED"
        assert body["message"] == "You must be logged in"

    @pytest.mark.asyncio
    async def test_claims_become_the_caller(self, http: AsyncClient):
        claims = _claims()
        token = jwt.encode(claims, SECRET, algorithm="HS256")

        response = await http.get("/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json() == {
            "id": claims["sub"],
            "display_name": "Camille Martin",
            "role": "authenticated",
        }

    @pytest.mark.parametrize(
        "claims",
        [
            _claims(email=None),
            _claims(sub="not-a-uuid"),
            _claims(exp=datetime.now(timezone.utc) - timedelta(minutes=1)),
        ],
        ids=["no-email", "foreign-subject", "expired"],
    )
    @pytest.mark.asyncio
    async def test_unusable_token_is_rejected(self, http: AsyncClient, claims: dict):
        token = jwt.encode(claims, SECRET, algorithm="HS256")

        response = await http.get("/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_TOKEN"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_token_signed_by_another_project_is_rejected(self, http: AsyncClient):
        token = jwt.encode(_claims(), "someone-elses-secret", algorithm="HS256")

        response = await http.get("/me", headers={"Authorization": f"Bearer {token}"})

        assert response.json()["error_code"] == "INVALID_TOKEN"


class TestTokenForwarding:
    @pytest.mark.asyncio
    async def test_gateway_receives_the_callers_token(
        self, http: AsyncClient, provider: JWTAuthProvider, forwarded: list[str | None]
    ):
        token = provider.create_token(TokenUser(id=uuid4(), email="rider@example.com"))

        response = await http.get("/records", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert forwarded == [token]

    @pytest.mark.asyncio
    async def test_no_context_is_opened_without_a_caller(
        self, http: AsyncClient, forwarded: list[str | None]
    ):
        response = await http.get("/records")

        assert response.status_code == 401
        assert forwarded == []


class TestOptionalUser:
    @pytest.mark.asyncio
    async def test_garbage_token_reads_as_anonymous(self, http: AsyncClient):
        response = await http.get("/maybe-me", headers={"Authorization": "Bearer invalid.jwt.token"})

        assert response.status_code == 200
        assert response.json() == {"anonymous": True}

    @pytest.mark.asyncio
    async def test_valid_token_is_not_anonymous(
        self, http: AsyncClient, provider: JWTAuthProvider
    ):
        token = provider.create_token(TokenUser(id=uuid4(), email="rider@example.com"))

        response = await http.get("/maybe-me", headers={"Authorization": f"Bearer {token}"})

        assert response.json() == {"anonymous": False}
