"""Pydantic schemas for Address API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AddressResponse(BaseModel):
    """Schema for Address response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    label: str | None = None
    line1: str
    line2: str | None = None
    postal_code: str
    city: str
    country: str
    lat: float | None = None
    lng: float | None = None
    created_at: datetime | None = None


class AddressDetailResponse(BaseModel):
    """Schema for single Address."""

    data: AddressResponse


class AddressResolutionResponse(BaseModel):
    """Outcome of a find-or-create."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "address_id": "0b7c3f5e-54b8-4c57-9f0a-3d9f3f1e2a11",
                "created": False,
            }
        },
    )

    address_id: UUID
    created: bool
