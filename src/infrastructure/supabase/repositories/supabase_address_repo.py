"""Supabase implementation of the Address repository."""

from uuid import UUID

from supabase import AsyncClient

from core.exceptions import AddressNotFoundError, RecordNotFoundError
from domain.entities.address import Address, AddressDraft, AddressSummary
from infrastructure.supabase.client import execute, select_by_ids
from infrastructure.supabase.rows import Row, parse_row, to_payload

TABLE = "addresses"
COLUMNS = "id,label,line1,line2,postal_code,city,country,lat,lng,created_by,created_at"
SUMMARY_COLUMNS = "id,label,city"


class SupabaseAddressRepository:
    """Supabase implementation of IAddressRepository."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def get(self, id: UUID) -> Address:
        request = self._client.table(TABLE).select(COLUMNS).eq("id", str(id)).single()
        try:
            row = await execute(request)
        except RecordNotFoundError as exc:
            raise AddressNotFoundError(str(id)) from exc
        return parse_row(Address, row)

    async def find_candidates(
        self, created_by: UUID, draft: AddressDraft, limit: int
    ) -> list[Address]:
        """The user's most recent addresses sharing the draft's postal code.

        Text fields are left out of the filter: the database compares them
        without Unicode normalization, so the caller decides on equality.
        """
        rows = await execute(
            self._client.table(TABLE)
            .select(COLUMNS)
            .eq("created_by", str(created_by))
            .eq("postal_code", draft.postal_code.strip())
            .order("created_at", desc=True)
            .limit(limit)
        )
        return [parse_row(Address, row) for row in rows]

    async def create(self, address: Address) -> Address:
        rows = await execute(self._client.table(TABLE).insert(self._to_payload(address)))
        return parse_row(Address, rows[0])

    async def get_many(self, ids: list[UUID]) -> list[AddressSummary]:
        rows = await select_by_ids(self._client, TABLE, SUMMARY_COLUMNS, ids)
        return [parse_row(AddressSummary, row) for row in rows]

    @staticmethod
    def _to_payload(address: Address) -> Row:
        return to_payload(
            {
                "label": address.label,
                "line1": address.line1,
                "line2": address.line2,
                "postal_code": address.postal_code,
                "city": address.city,
                "country": address.country,
                "lat": address.lat,
                "lng": address.lng,
                "created_by": address.created_by,
            }
        )
