"""Horse movement entities."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from uuid import UUID

from domain.entities.address import AddressDraft, AddressSummary
from domain.entities.intervention import InterventionSummary
from domain.entities.link import Link
from domain.entities.professional import Professional, ProfessionalSummary


def _as_utc(value: datetime) -> datetime:
    """Read a naive timestamp as UTC so it compares with aware ones."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class TransportMode(StrEnum):
    """How the horse travelled."""

    UNKNOWN = "unknown"
    VAN = "van"
    TRUCK = "truck"
    ON_FOOT = "on_foot"
    OTHER = "other"


@dataclass
class Movement:
    """A transport event of one horse to a destination address.

    ``from_address_id`` is None when no prior detention place is known.
    ``return_at`` earlier than ``start_at`` is tolerated.
    """

    horse_id: UUID
    to_address_id: UUID
    start_at: datetime
    id: UUID | None = None
    from_address_id: UUID | None = None
    professional_id: UUID | None = None
    intervention_id: UUID | None = None
    return_at: datetime | None = None
    reason: str | None = None
    transport: TransportMode = TransportMode.UNKNOWN
    manual: bool = True
    created_by: UUID | None = None
    created_at: datetime | None = None

    @property
    def returns_before_start(self) -> bool:
        if self.return_at is None:
            return False
        return _as_utc(self.return_at) < _as_utc(self.start_at)


@dataclass(frozen=True, slots=True)
class EnrichedMovement:
    """A movement with its foreign keys resolved for display."""

    movement: Movement
    professional: Link[ProfessionalSummary]
    to_address: Link[AddressSummary]
    from_address: Link[AddressSummary]
    intervention: Link[InterventionSummary]

    @property
    def title(self) -> str:
        """Reason, else the intervention title, else a generic label."""
        if self.movement.reason:
            return self.movement.reason
        if self.intervention.value and self.intervention.value.title:
            return self.intervention.value.title
        return "Movement"


@dataclass(frozen=True, slots=True)
class MovementFormContext:
    """What a new-movement form needs: the departure place and destinations."""

    from_address_id: UUID | None
    professionals: list[Professional]


@dataclass(frozen=True, slots=True)
class MovementDestination:
    """Where a new movement goes: a professional's address or an external one."""

    professional_id: UUID | None = None
    address: AddressDraft | None = None
