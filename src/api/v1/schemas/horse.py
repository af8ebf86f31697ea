"""Pydantic schemas for Horse API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.horse import HorseSex


class HorseCreate(BaseModel):
    """Schema for creating a Horse."""

    name: str = Field(..., min_length=1, max_length=100)
    birthdate: date | None = None
    sex: HorseSex | None = None
    sire_number: str | None = Field(None, max_length=40)


class HorseUpdate(BaseModel):
    """Schema for updating a Horse. Only the fields sent are changed."""

    name: str | None = Field(None, min_length=1, max_length=100)
    birthdate: date | None = None
    sex: HorseSex | None = None
    sire_number: str | None = Field(None, max_length=40)


class HorseResponse(BaseModel):
    """Schema for Horse response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "3f1e2a11-0b7c-4c57-9f0a-54b83d9f3f1e",
                "owner_id": "9a1b2c3d-4e5f-4a6b-8c7d-0e1f2a3b4c5d",
                "name": "Parissa",
                "birthdate": "2014-05-02",
                "sex": "mare",
                "sire_number": "25012345X",
                "photo_url": None,
                "created_at": "2026-03-01T09:30:00Z",
            }
        },
    )

    id: UUID
    owner_id: UUID
    name: str
    birthdate: date | None = None
    sex: HorseSex | None = None
    sire_number: str | None = None
    photo_url: str | None = None
    created_at: datetime | None = None


class HorseListResponse(BaseModel):
    """Schema for list of Horses."""

    data: list[HorseResponse]


class HorseDetailResponse(BaseModel):
    """Schema for single Horse."""

    data: HorseResponse
