"""Pydantic schemas for Professional API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.address import AddressResponse
from api.v1.schemas.common import AddressInput
from domain.entities.professional import ProfessionKind


class ProfessionalCreate(BaseModel):
    """Schema for creating a Professional."""

    display_name: str = Field(..., min_length=1, max_length=120)
    kind: ProfessionKind
    company_name: str | None = Field(None, max_length=120)
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=40)
    website: str | None = Field(None, max_length=200)
    notes: str | None = Field(None, max_length=2000)
    address: AddressInput | None = None


class ProfessionalUpdate(BaseModel):
    """Schema for updating a Professional.

    Omitted fields are unchanged. ``address`` omitted keeps the current
    address; ``clear_address`` detaches it.
    """

    display_name: str | None = Field(None, min_length=1, max_length=120)
    kind: ProfessionKind | None = None
    company_name: str | None = Field(None, max_length=120)
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=40)
    website: str | None = Field(None, max_length=200)
    notes: str | None = Field(None, max_length=2000)
    is_verified: bool | None = None
    address: AddressInput | None = None
    clear_address: bool = False


class ProfessionalResponse(BaseModel):
    """Schema for Professional response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    display_name: str
    kind: ProfessionKind
    company_name: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    notes: str | None = None
    address_id: UUID | None = None
    is_verified: bool = False
    created_by: UUID | None = None
    created_at: datetime | None = None


class HorseLinkResponse(BaseModel):
    id: UUID
    name: str


class ProfessionalDetail(ProfessionalResponse):
    """A professional with its address and linked horses."""

    address: AddressResponse | None = None
    linked_horses: list[HorseLinkResponse] = []


class ProfessionalListResponse(BaseModel):
    """Schema for list of Professionals."""

    data: list[ProfessionalResponse]


class ProfessionalDetailResponse(BaseModel):
    """Schema for single Professional."""

    data: ProfessionalDetail


class ProfessionalCreationResponse(BaseModel):
    """Outcome of a create request.

    ``created`` is false when an equivalent professional already existed;
    ``location`` then points at it.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "professional_id": "54b83d9f-3f1e-4c57-9f0a-0b7c2a113f1e",
                "created": False,
                "location": "/api/v1/professionals/54b83d9f-3f1e-4c57-9f0a-0b7c2a113f1e",
            }
        },
    )

    professional_id: UUID
    created: bool
    location: str
