"""Common Pydantic schemas shared across the API."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


class AddressInput(BaseModel):
    """Address fields as typed by the user."""

    label: str | None = Field(None, max_length=120)
    line1: str = Field("", max_length=200)
    line2: str | None = Field(None, max_length=200)
    postal_code: str = Field("", max_length=20)
    city: str = Field("", max_length=120)
    country: str | None = Field("FR", max_length=60)
    lat: float | None = Field(None, ge=-90, le=90)
    lng: float | None = Field(None, ge=-180, le=180)


class AddressSummaryResponse(BaseModel):
    """Label and city of a referenced address."""

    id: UUID
    label: str | None = None
    city: str | None = None
