"""Horse domain entity."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class HorseSex(StrEnum):
    """Sex of a horse as recorded by its owner."""

    MARE = "mare"
    GELDING = "gelding"
    STALLION = "stallion"
    UNKNOWN = "unknown"


@dataclass
class Horse:
    """Domain entity for a Horse, owned by exactly one user."""

    owner_id: UUID
    name: str
    id: UUID | None = None
    birthdate: date | None = None
    sex: HorseSex | None = None
    sire_number: str | None = None
    photo_path: str | None = None
    created_at: datetime | None = None

    def is_owned_by(self, user_id: UUID) -> bool:
        """Check whether the given user owns this horse."""
        return self.owner_id == user_id


@dataclass(frozen=True, slots=True)
class HorseSummary:
    """Read-only projection used when listing horses linked to something else."""

    id: UUID
    name: str


@dataclass(frozen=True, slots=True)
class HorseDetail:
    """A horse with a time-limited URL to its photo, when it has one."""

    horse: Horse
    photo_url: str | None = None
