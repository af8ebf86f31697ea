"""Supabase implementation of the Professional repository."""

from uuid import UUID

from supabase import AsyncClient

from core.exceptions import GatewayError, ProfessionalNotFoundError, RecordNotFoundError
from domain.entities.address import DEFAULT_COUNTRY, AddressDraft
from domain.entities.horse import HorseSummary
from domain.entities.professional import Professional, ProfessionalSummary, ProfessionKind
from infrastructure.supabase.client import execute, select_by_ids
from infrastructure.supabase.filters import any_ilike, escape_like
from infrastructure.supabase.rows import Row, parse_row, to_payload

TABLE = "professionals"
COLUMNS = (
    "id,display_name,company_name,kind,email,phone,website,notes,"
    "address_id,is_verified,created_by,created_at"
)
SUMMARY_COLUMNS = "id,display_name"
SEARCH_COLUMNS = ("display_name", "company_name", "email", "phone")
CREATE_WITH_ADDRESS_FUNCTION = "create_professional_with_address"


class SupabaseProfessionalRepository:
    """Supabase implementation of IProfessionalRepository."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def get(self, id: UUID) -> Professional:
        request = self._client.table(TABLE).select(COLUMNS).eq("id", str(id)).single()
        try:
            row = await execute(request)
        except RecordNotFoundError as exc:
            raise ProfessionalNotFoundError(str(id)) from exc
        return self._to_entity(row)

    async def search(
        self, query: str | None = None, kind: ProfessionKind | None = None
    ) -> list[Professional]:
        request = self._client.table(TABLE).select(COLUMNS)
        if kind is not None:
            request = request.eq("kind", str(kind))
        term = (query or "").strip()
        if term:
            request = request.or_(any_ilike(SEARCH_COLUMNS, term))
        rows = await execute(request.order("display_name"))
        return [self._to_entity(row) for row in rows]

    async def list_with_address(self) -> list[Professional]:
        rows = await execute(
            self._client.table(TABLE)
            .select(COLUMNS)
            .not_.is_("address_id", "null")
            .order("display_name")
        )
        return [self._to_entity(row) for row in rows]

    async def find_by_kind_and_email(self, kind: ProfessionKind, email: str) -> UUID | None:
        rows = await execute(
            self._client.table(TABLE)
            .select("id")
            .eq("kind", str(kind))
            .ilike("email", escape_like(email.strip()))
            .limit(1)
        )
        return UUID(rows[0]["id"]) if rows else None

    async def find_by_kind_and_phone(self, kind: ProfessionKind, digits: str) -> UUID | None:
        rows = await execute(
            self._client.table(TABLE)
            .select("id")
            .eq("kind", str(kind))
            .eq("phone_digits", digits)
            .limit(1)
        )
        return UUID(rows[0]["id"]) if rows else None

    async def create(self, professional: Professional) -> Professional:
        payload = self._to_payload(professional)
        payload["created_by"] = str(professional.created_by) if professional.created_by else None
        rows = await execute(self._client.table(TABLE).insert(payload))
        return self._to_entity(rows[0])

    async def create_with_address(
        self, professional: Professional, address: AddressDraft | None
    ) -> UUID:
        """Create through the database function; address matching runs server-side."""
        params = {
            "p_professional": self._to_payload(professional),
            "p_address": self._address_payload(address) if address else None,
        }
        result = await execute(
            self._client.rpc(CREATE_WITH_ADDRESS_FUNCTION, params),
            function=CREATE_WITH_ADDRESS_FUNCTION,
        )
        try:
            return UUID(str(result))
        except ValueError as exc:
            raise GatewayError(
                "Malformed professional id", gateway_code="MALFORMED_ROW"
            ) from exc

    async def update(self, professional: Professional) -> Professional:
        if professional.id is None:
            raise ProfessionalNotFoundError("")
        payload = self._to_payload(professional)
        payload["is_verified"] = professional.is_verified
        rows = await execute(
            self._client.table(TABLE).update(payload).eq("id", str(professional.id))
        )
        if not rows:
            raise ProfessionalNotFoundError(str(professional.id))
        return self._to_entity(rows[0])

    async def delete(self, id: UUID) -> None:
        await execute(self._client.table(TABLE).delete().eq("id", str(id)))

    async def get_many(self, ids: list[UUID]) -> list[ProfessionalSummary]:
        rows = await select_by_ids(self._client, TABLE, SUMMARY_COLUMNS, ids)
        return [parse_row(ProfessionalSummary, row) for row in rows]

    async def list_linked_horses(self, id: UUID) -> list[HorseSummary]:
        rows = await execute(
            self._client.table("horse_professionals")
            .select("horse:horses(id,name)")
            .eq("professional_id", str(id))
        )
        # Horses hidden by row-level security embed as null
        return [parse_row(HorseSummary, row["horse"]) for row in rows if row.get("horse")]

    @staticmethod
    def _to_entity(row: Row) -> Professional:
        return parse_row(Professional, row)

    @staticmethod
    def _to_payload(professional: Professional) -> Row:
        return to_payload(
            {
                "display_name": professional.display_name,
                "company_name": professional.company_name,
                "kind": professional.kind,
                "email": professional.email,
                "phone": professional.phone,
                "website": professional.website,
                "notes": professional.notes,
                "address_id": professional.address_id,
            }
        )

    @staticmethod
    def _address_payload(draft: AddressDraft) -> Row:
        return to_payload(
            {
                "label": (draft.label or "").strip() or None,
                "line1": draft.line1.strip(),
                "line2": (draft.line2 or "").strip() or None,
                "postal_code": draft.postal_code.strip(),
                "city": draft.city.strip(),
                "country": (draft.country or DEFAULT_COUNTRY).strip() or DEFAULT_COUNTRY,
                "lat": draft.lat,
                "lng": draft.lng,
            }
        )
