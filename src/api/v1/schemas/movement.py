"""Pydantic schemas for Movement API."""

from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from api.v1.schemas.common import AddressInput, AddressSummaryResponse
from api.v1.schemas.professional import ProfessionalResponse
from domain.entities.link import LinkStatus
from domain.entities.movement import TransportMode

T = TypeVar("T")


class LinkResponse(BaseModel, Generic[T]):
    """A reference with its resolution status.

    ``status`` is ``absent`` (no reference), ``resolved``, ``missing``
    (reference set but not readable) or ``failed`` (lookup error).
    """

    id: UUID | None = None
    status: LinkStatus
    value: T | None = None


class ProfessionalNameResponse(BaseModel):
    id: UUID
    display_name: str | None = None


class InterventionTitleResponse(BaseModel):
    id: UUID
    title: str | None = None


class MovementResponse(BaseModel):
    """A movement with its references resolved for display."""

    id: UUID
    horse_id: UUID
    title: str
    start_at: datetime
    return_at: datetime | None = None
    reason: str | None = None
    transport: TransportMode
    manual: bool
    created_at: datetime | None = None
    professional: LinkResponse[ProfessionalNameResponse]
    to_address: LinkResponse[AddressSummaryResponse]
    from_address: LinkResponse[AddressSummaryResponse]
    intervention: LinkResponse[InterventionTitleResponse]


class MovementListResponse(BaseModel):
    """Schema for list of Movements."""

    data: list[MovementResponse]


class MovementCreate(BaseModel):
    """Schema for recording a movement.

    Exactly one of ``professional_id`` and ``external_address`` is required.
    Timestamps must carry a UTC offset.
    """

    professional_id: UUID | None = None
    external_address: AddressInput | None = None
    start_at: AwareDatetime
    return_at: AwareDatetime | None = None
    reason: str | None = Field(None, max_length=500)
    transport: TransportMode = TransportMode.UNKNOWN

    @model_validator(mode="after")
    def check_destination(self) -> "MovementCreate":
        if (self.professional_id is None) == (self.external_address is None):
            raise ValueError("Provide either professional_id or external_address")
        return self


class MovementCreatedResponse(BaseModel):
    """Schema for a newly recorded movement."""

    id: UUID
    horse_id: UUID
    from_address_id: UUID | None = None
    to_address_id: UUID
    professional_id: UUID | None = None
    start_at: datetime
    return_at: datetime | None = None
    reason: str | None = None
    transport: TransportMode
    manual: bool


class MovementDetailResponse(BaseModel):
    data: MovementCreatedResponse


class MovementFormContextResponse(BaseModel):
    """Departure place and candidate destinations for a new movement."""

    from_address_id: UUID | None = None
    professionals: list[ProfessionalResponse]
