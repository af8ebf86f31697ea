"""Supabase implementations of the movement and horse location repositories."""

from uuid import UUID

from supabase import AsyncClient

from core.exceptions import GatewayError
from domain.entities.movement import Movement
from infrastructure.supabase.client import execute
from infrastructure.supabase.rows import Row, parse_row, to_payload

TABLE = "horse_movements"
COLUMNS = (
    "id,horse_id,from_address_id,to_address_id,professional_id,intervention_id,"
    "start_at,return_at,reason,transport,manual,created_by,created_at"
)
CURRENT_DETENTION_FUNCTION = "current_detention_address_id"


class SupabaseMovementRepository:
    """Supabase implementation of IMovementRepository."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def list_for_horse(self, horse_id: UUID) -> list[Movement]:
        rows = await execute(
            self._client.table(TABLE)
            .select(COLUMNS)
            .eq("horse_id", str(horse_id))
            .order("start_at", desc=True, nullsfirst=False)
            .order("created_at", desc=True)
        )
        return [parse_row(Movement, row) for row in rows]

    async def create(self, movement: Movement) -> Movement:
        rows = await execute(self._client.table(TABLE).insert(self._to_payload(movement)))
        return parse_row(Movement, rows[0])

    @staticmethod
    def _to_payload(movement: Movement) -> Row:
        return to_payload(
            {
                "horse_id": movement.horse_id,
                "from_address_id": movement.from_address_id,
                "to_address_id": movement.to_address_id,
                "professional_id": movement.professional_id,
                "intervention_id": movement.intervention_id,
                "start_at": movement.start_at,
                "return_at": movement.return_at,
                "reason": movement.reason,
                "transport": movement.transport,
                "manual": movement.manual,
                "created_by": movement.created_by,
            }
        )


class SupabaseHorseLocationRepository:
    """Asks the database where a horse currently lives."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def current_detention_address_id(self, horse_id: UUID) -> UUID | None:
        result = await execute(
            self._client.rpc(CURRENT_DETENTION_FUNCTION, {"p_horse": str(horse_id)}),
            function=CURRENT_DETENTION_FUNCTION,
        )
        if not result:
            return None
        try:
            return UUID(str(result))
        except ValueError as exc:
            raise GatewayError(
                "Malformed detention address id", gateway_code="MALFORMED_ROW"
            ) from exc
