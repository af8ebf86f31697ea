"""Unit tests for the batched foreign-key resolver."""

import asyncio
from dataclasses import dataclass
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from core.exceptions import GatewayError
from domain.entities.address import AddressSummary
from domain.entities.link import Link, LinkStatus
from domain.entities.professional import ProfessionalSummary
from domain.services.join_resolver import Relation, distinct_keys, resolve_relations


@dataclass
class Row:
    professional_id: UUID | None = None
    address_id: UUID | None = None


class TestDistinctKeys:
    def test_drops_nulls_and_duplicates_in_first_seen_order(self):
        a, b = uuid4(), uuid4()
        rows = [Row(professional_id=b), Row(), Row(professional_id=a), Row(professional_id=b)]

        assert distinct_keys(rows, lambda r: r.professional_id) == [b, a]


class TestResolveRelations:
    @pytest.mark.asyncio
    async def test_resolves_each_relation_with_one_batched_call(self):
        pro, addr = uuid4(), uuid4()
        rows = [Row(pro, addr), Row(pro, None)]
        fetch_pros = AsyncMock(return_value=[ProfessionalSummary(id=pro, display_name="Dr Vet")])
        fetch_addrs = AsyncMock(return_value=[AddressSummary(id=addr, label="Clinic", city="Lyon")])

        result = await resolve_relations(
            rows,
            [
                Relation("professional", lambda r: r.professional_id, fetch_pros),
                Relation("address", lambda r: r.address_id, fetch_addrs),
            ],
        )

        fetch_pros.assert_awaited_once_with([pro])
        fetch_addrs.assert_awaited_once_with([addr])
        assert result[0]["professional"].status is LinkStatus.RESOLVED
        assert result[0]["professional"].value.display_name == "Dr Vet"
        assert result[0]["address"].value.city == "Lyon"
        assert result[1]["address"] == Link.absent()

    @pytest.mark.asyncio
    async def test_issues_no_request_when_no_row_has_the_key(self):
        fetch = AsyncMock()

        result = await resolve_relations(
            [Row(), Row()], [Relation("professional", lambda r: r.professional_id, fetch)]
        )

        fetch.assert_not_awaited()
        assert all(links["professional"].status is LinkStatus.ABSENT for links in result)

    @pytest.mark.asyncio
    async def test_marks_unreturned_keys_missing(self):
        visible, hidden = uuid4(), uuid4()
        fetch = AsyncMock(return_value=[ProfessionalSummary(id=visible)])

        result = await resolve_relations(
            [Row(hidden), Row(visible)],
            [Relation("professional", lambda r: r.professional_id, fetch)],
        )

        assert result[0]["professional"] == Link(hidden, LinkStatus.MISSING)
        assert result[1]["professional"].status is LinkStatus.RESOLVED

    @pytest.mark.asyncio
    async def test_failed_relation_does_not_affect_the_others(self):
        pro, addr = uuid4(), uuid4()
        fetch_pros = AsyncMock(side_effect=GatewayError("boom", http_status=500))
        fetch_addrs = AsyncMock(return_value=[AddressSummary(id=addr, city="Caen")])

        result = await resolve_relations(
            [Row(pro, addr)],
            [
                Relation("professional", lambda r: r.professional_id, fetch_pros),
                Relation("address", lambda r: r.address_id, fetch_addrs),
            ],
        )

        assert result[0]["professional"] == Link(pro, LinkStatus.FAILED)
        assert result[0]["address"].status is LinkStatus.RESOLVED

    @pytest.mark.asyncio
    async def test_preserves_row_order(self):
        ids = [uuid4() for _ in range(5)]
        fetch = AsyncMock(
            return_value=[ProfessionalSummary(id=i, display_name=str(n)) for n, i in enumerate(reversed(ids))]
        )

        result = await resolve_relations(
            [Row(i) for i in ids], [Relation("professional", lambda r: r.professional_id, fetch)]
        )

        assert [links["professional"].id for links in result] == ids

    @pytest.mark.asyncio
    async def test_lookups_run_concurrently(self):
        started: list[str] = []
        release = asyncio.Event()

        async def slow(name: str, keys: list[UUID]) -> list[AddressSummary]:
            started.append(name)
            if len(started) == 2:
                release.set()
            await asyncio.wait_for(release.wait(), timeout=1)
            return []

        result = await resolve_relations(
            [Row(uuid4(), uuid4())],
            [
                Relation("professional", lambda r: r.professional_id, lambda k: slow("p", k)),
                Relation("address", lambda r: r.address_id, lambda k: slow("a", k)),
            ],
        )

        assert sorted(started) == ["a", "p"]
        assert {link.status for link in result[0].values()} == {LinkStatus.MISSING}

    @pytest.mark.asyncio
    async def test_cancellation_is_not_swallowed(self):
        fetch = AsyncMock(side_effect=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await resolve_relations(
                [Row(uuid4())], [Relation("professional", lambda r: r.professional_id, fetch)]
            )
