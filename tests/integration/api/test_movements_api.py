"""Integration tests for Movement API endpoints."""

import pytest
from httpx import AsyncClient

from tests.fakes import InMemoryStore

VET = {
    "display_name": "Dr Martin",
    "kind": "veterinarian",
    "email": "martin@vet.fr",
    "address": {
        "label": "Clinique du Pin",
        "line1": "1 route du Haras",
        "postal_code": "61310",
        "city": "Le Pin-au-Haras",
    },
}

EXTERNAL = {
    "label": "Pension des Saules",
    "line1": "12 chemin des Saules",
    "postal_code": "14000",
    "city": "Caen",
    "country": "FR",
}


async def _horse(client: AsyncClient) -> str:
    response = await client.post("/api/v1/horses", json={"name": "Parissa"})
    return response.json()["data"]["id"]  # type: ignore[no-any-return]


async def _vet(client: AsyncClient) -> str:
    response = await client.post("/api/v1/professionals", json=VET)
    assert response.status_code == 201, response.text
    return response.json()["professional_id"]  # type: ignore[no-any-return]


def _url(horse_id: str) -> str:
    return f"/api/v1/horses/{horse_id}/movements"


class TestCreateMovement:
    @pytest.mark.asyncio
    async def test_to_a_professional(self, authenticated_client: AsyncClient) -> None:
        horse_id = await _horse(authenticated_client)
        vet_id = await _vet(authenticated_client)

        response = await authenticated_client.post(
            _url(horse_id),
            json={"professional_id": vet_id, "start_at": "2024-06-01T09:00:00Z", "transport": "van"},
        )

        assert response.status_code == 201, response.text
        data = response.json()["data"]
        assert data["professional_id"] == vet_id
        assert data["from_address_id"] is None
        assert data["manual"] is True
        assert data["transport"] == "van"

    @pytest.mark.asyncio
    async def test_departure_is_the_current_detention_place(
        self, authenticated_client: AsyncClient
    ) -> None:
        horse_id = await _horse(authenticated_client)
        first = await authenticated_client.post(
            _url(horse_id),
            json={"external_address": EXTERNAL, "start_at": "2024-01-10T08:00:00Z"},
        )
        vet_id = await _vet(authenticated_client)

        second = await authenticated_client.post(
            _url(horse_id),
            json={"professional_id": vet_id, "start_at": "2024-06-01T09:00:00Z"},
        )

        assert second.json()["data"]["from_address_id"] == first.json()["data"]["to_address_id"]

    @pytest.mark.asyncio
    async def test_external_address_is_reused(
        self, authenticated_client: AsyncClient, store: InMemoryStore
    ) -> None:
        horse_id = await _horse(authenticated_client)
        shouty = {**EXTERNAL, "city": "  CAEN "}

        a = await authenticated_client.post(
            _url(horse_id), json={"external_address": EXTERNAL, "start_at": "2024-01-10T08:00:00Z"}
        )
        b = await authenticated_client.post(
            _url(horse_id), json={"external_address": shouty, "start_at": "2024-02-10T08:00:00Z"}
        )

        assert a.json()["data"]["to_address_id"] == b.json()["data"]["to_address_id"]
        assert len(store.addresses) == 1

    @pytest.mark.asyncio
    async def test_return_before_start_is_accepted(self, authenticated_client: AsyncClient) -> None:
        horse_id = await _horse(authenticated_client)

        response = await authenticated_client.post(
            _url(horse_id),
            json={
                "external_address": EXTERNAL,
                "start_at": "2024-06-01T09:00:00Z",
                "return_at": "2024-05-01T09:00:00Z",
            },
        )

        assert response.status_code == 201
        assert response.json()["data"]["return_at"].startswith("2024-05-01")

    @pytest.mark.asyncio
    async def test_timestamp_without_offset_is_a_request_error(
        self, authenticated_client: AsyncClient, store: InMemoryStore
    ) -> None:
        horse_id = await _horse(authenticated_client)

        response = await authenticated_client.post(
            _url(horse_id),
            json={
                "external_address": EXTERNAL,
                "start_at": "2026-01-01T10:00:00Z",
                "return_at": "2026-01-01T09:00:00",
            },
        )

        assert response.status_code == 422
        assert response.json()["details"][0]["field"] == "body.return_at"
        assert store.movements == {}

    @pytest.mark.asyncio
    async def test_both_destinations_is_a_request_error(
        self, authenticated_client: AsyncClient
    ) -> None:
        horse_id = await _horse(authenticated_client)
        vet_id = await _vet(authenticated_client)

        response = await authenticated_client.post(
            _url(horse_id),
            json={
                "professional_id": vet_id,
                "external_address": EXTERNAL,
                "start_at": "2024-06-01T09:00:00Z",
            },
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_external_address_needs_a_label(self, authenticated_client: AsyncClient) -> None:
        horse_id = await _horse(authenticated_client)

        response = await authenticated_client.post(
            _url(horse_id),
            json={
                "external_address": {**EXTERNAL, "label": ""},
                "start_at": "2024-06-01T09:00:00Z",
            },
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "label"}

    @pytest.mark.asyncio
    async def test_professional_without_address(self, authenticated_client: AsyncClient) -> None:
        horse_id = await _horse(authenticated_client)
        created = await authenticated_client.post(
            "/api/v1/professionals", json={"display_name": "Coach Léa", "kind": "coach"}
        )

        response = await authenticated_client.post(
            _url(horse_id),
            json={
                "professional_id": created.json()["professional_id"],
                "start_at": "2024-06-01T09:00:00Z",
            },
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "professional_id"}


class TestListMovements:
    @pytest.mark.asyncio
    async def test_latest_first_with_resolved_references(
        self, authenticated_client: AsyncClient
    ) -> None:
        horse_id = await _horse(authenticated_client)
        vet_id = await _vet(authenticated_client)
        await authenticated_client.post(
            _url(horse_id),
            json={"external_address": EXTERNAL, "start_at": "2024-01-10T08:00:00Z"},
        )
        await authenticated_client.post(
            _url(horse_id),
            json={"professional_id": vet_id, "start_at": "2024-06-01T09:00:00Z", "reason": "Vaccins"},
        )

        response = await authenticated_client.get(_url(horse_id))

        assert response.status_code == 200
        latest, earliest = response.json()["data"]
        assert latest["title"] == "Vaccins"
        assert latest["professional"] == {
            "id": vet_id,
            "status": "resolved",
            "value": {"id": vet_id, "display_name": "Dr Martin"},
        }
        assert latest["to_address"]["value"]["city"] == "Le Pin-au-Haras"
        assert latest["from_address"]["value"]["label"] == "Pension des Saules"
        assert latest["intervention"] == {"id": None, "status": "absent", "value": None}
        assert earliest["title"] == "Movement"
        assert earliest["from_address"]["status"] == "absent"

    @pytest.mark.asyncio
    async def test_unreadable_and_failed_references_are_marked(
        self, authenticated_client: AsyncClient, store: InMemoryStore
    ) -> None:
        horse_id = await _horse(authenticated_client)
        vet_id = await _vet(authenticated_client)
        await authenticated_client.post(
            _url(horse_id),
            json={"professional_id": vet_id, "start_at": "2024-06-01T09:00:00Z"},
        )
        store.professionals.clear()
        store.failing_lookups.add("address")

        response = await authenticated_client.get(_url(horse_id))

        assert response.status_code == 200
        (item,) = response.json()["data"]
        assert item["professional"]["status"] == "missing"
        assert item["professional"]["id"] == vet_id
        assert item["to_address"]["status"] == "failed"
        assert item["to_address"]["value"] is None

    @pytest.mark.asyncio
    async def test_form_context(self, authenticated_client: AsyncClient) -> None:
        horse_id = await _horse(authenticated_client)
        vet_id = await _vet(authenticated_client)
        await authenticated_client.post(
            "/api/v1/professionals", json={"display_name": "Coach Léa", "kind": "coach"}
        )
        created = await authenticated_client.post(
            _url(horse_id),
            json={"external_address": EXTERNAL, "start_at": "2024-01-10T08:00:00Z"},
        )

        response = await authenticated_client.get(f"{_url(horse_id)}/form-context")

        assert response.status_code == 200
        data = response.json()
        assert data["from_address_id"] == created.json()["data"]["to_address_id"]
        assert [p["id"] for p in data["professionals"]] == [vet_id]
