"""Integration tests for Horse API endpoints."""

from datetime import timedelta
from uuid import UUID

import pytest
from httpx import AsyncClient

from infrastructure.auth.provider import TokenUser
from tests.fakes import InMemoryStore

BASE = "/api/v1/horses"


async def _create_horse(client: AsyncClient, **overrides) -> dict:  # type: ignore[no-untyped-def]
    body = {"name": "Parissa", "birthdate": "2014-05-02", "sex": "mare", "sire_number": "25012345X"}
    body.update(overrides)
    response = await client.post(BASE, json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]  # type: ignore[no-any-return]


class TestHorseCrud:
    @pytest.mark.asyncio
    async def test_create_and_list(
        self, authenticated_client: AsyncClient, test_user: TokenUser
    ) -> None:
        created = await _create_horse(authenticated_client, name="  Parissa  ")

        assert created["name"] == "Parissa"
        assert created["owner_id"] == str(test_user.id)
        assert created["photo_url"] is None

        response = await authenticated_client.get(BASE)
        assert response.status_code == 200
        assert [h["id"] for h in response.json()["data"]] == [created["id"]]

    @pytest.mark.asyncio
    async def test_list_only_shows_my_horses(
        self,
        authenticated_client: AsyncClient,
        other_headers: dict[str, str],
    ) -> None:
        await _create_horse(authenticated_client)

        response = await authenticated_client.get(BASE, headers=other_headers)

        assert response.status_code == 200
        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_blank_name_is_rejected(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(BASE, json={"name": "   "})

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "name"}

    @pytest.mark.asyncio
    async def test_unknown_sex_value_is_rejected(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(BASE, json={"name": "X", "sex": "jument"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_get_missing_horse(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get(f"{BASE}/3f1e2a11-0b7c-4c57-9f0a-54b83d9f3f1e")

        assert response.status_code == 404
        assert response.json()["error_code"] == "HORSE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_patch_changes_only_sent_fields(self, authenticated_client: AsyncClient) -> None:
        horse = await _create_horse(authenticated_client)

        response = await authenticated_client.patch(
            f"{BASE}/{horse['id']}", json={"name": "Parissa II", "sire_number": None}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Parissa II"
        assert data["sire_number"] is None
        assert data["birthdate"] == "2014-05-02"
        assert data["created_at"] == horse["created_at"]

    @pytest.mark.asyncio
    async def test_patch_by_another_user_is_denied(
        self, authenticated_client: AsyncClient, other_headers: dict[str, str]
    ) -> None:
        horse = await _create_horse(authenticated_client)

        response = await authenticated_client.patch(
            f"{BASE}/{horse['id']}", json={"name": "Stolen"}, headers=other_headers
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "ACCESS_DENIED"

    @pytest.mark.asyncio
    async def test_delete(self, authenticated_client: AsyncClient, store: InMemoryStore) -> None:
        horse = await _create_horse(authenticated_client)

        response = await authenticated_client.delete(f"{BASE}/{horse['id']}")

        assert response.status_code == 204
        assert store.horses == {}

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.get(BASE)

        assert response.status_code == 401


class TestHorsePhoto:
    @pytest.mark.asyncio
    async def test_upload_returns_a_signed_url(
        self, authenticated_client: AsyncClient, store: InMemoryStore, test_user: TokenUser
    ) -> None:
        horse = await _create_horse(authenticated_client)

        response = await authenticated_client.post(
            f"{BASE}/{horse['id']}/photo",
            files={"photo": ("portrait du cheval.jpg", b"\xff\xd8\xff\xe0jpeg", "image/jpeg")},
        )

        assert response.status_code == 200, response.text
        photo_url = response.json()["data"]["photo_url"]
        assert photo_url.startswith("https://test.supabase.co/storage/v1/object/sign/horse-photos/")
        (path,) = store.objects
        assert path.startswith(f"{test_user.id}/{horse['id']}/")
        assert path.endswith("_portrait_du_cheval.jpg")
        assert store.objects[path] == (b"\xff\xd8\xff\xe0jpeg", "image/jpeg")

        detail = await authenticated_client.get(f"{BASE}/{horse['id']}")
        assert detail.json()["data"]["photo_url"] == photo_url

    @pytest.mark.asyncio
    async def test_non_image_is_rejected(
        self, authenticated_client: AsyncClient, store: InMemoryStore
    ) -> None:
        horse = await _create_horse(authenticated_client)

        response = await authenticated_client.post(
            f"{BASE}/{horse['id']}/photo",
            files={"photo": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "photo"}
        assert store.objects == {}

    @pytest.mark.asyncio
    async def test_other_user_cannot_upload(
        self,
        authenticated_client: AsyncClient,
        other_headers: dict[str, str],
        store: InMemoryStore,
    ) -> None:
        horse = await _create_horse(authenticated_client)

        response = await authenticated_client.post(
            f"{BASE}/{horse['id']}/photo",
            files={"photo": ("p.jpg", b"\xff\xd8", "image/jpeg")},
            headers=other_headers,
        )

        assert response.status_code == 403
        assert store.objects == {}


class TestNewHorseScenario:
    @pytest.mark.asyncio
    async def test_create_list_rename_and_read_back(
        self, authenticated_client: AsyncClient, store: InMemoryStore
    ) -> None:
        older = await _create_horse(authenticated_client, name="Ulysse")
        store.horses[UUID(older["id"])].created_at -= timedelta(days=30)  # type: ignore[operator]
        created = await _create_horse(
            authenticated_client, name="Parissa", birthdate=None, sex=None, sire_number=None
        )

        listing = await authenticated_client.get(BASE)
        assert [h["id"] for h in listing.json()["data"]] == [created["id"], older["id"]]

        renamed = await authenticated_client.patch(
            f"{BASE}/{created['id']}", json={"name": "Parissa II"}
        )
        assert renamed.status_code == 200

        detail = await authenticated_client.get(f"{BASE}/{created['id']}")
        data = detail.json()["data"]
        assert data["name"] == "Parissa II"
        assert data["created_at"] == created["created_at"]
        assert data["birthdate"] is None
        assert data["sex"] is None
