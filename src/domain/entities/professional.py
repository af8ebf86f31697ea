"""Professional directory entities."""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from domain.entities.address import Address, AddressDraft
from domain.entities.horse import HorseSummary

MIN_PHONE_DIGITS = 9

_NON_DIGITS = re.compile(r"\D")


class ProfessionKind(StrEnum):
    """Closed list of professions kept in the directory."""

    COACH = "coach"
    VETERINARIAN = "veterinarian"
    FARRIER = "farrier"
    OSTEOPATH = "osteopath"
    DENTIST = "dentist"
    SADDLE_FITTER = "saddle_fitter"
    PHYSIOTHERAPIST = "physiotherapist"
    SHIATSU = "shiatsu"
    OTHER = "other"


def phone_digits(phone: str | None) -> str:
    """Strip everything but digits from a phone number."""
    return _NON_DIGITS.sub("", phone or "")


@dataclass
class Professional:
    """Domain entity for a service professional (vet, farrier, coach...)."""

    display_name: str
    kind: ProfessionKind
    id: UUID | None = None
    company_name: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    notes: str | None = None
    address_id: UUID | None = None
    is_verified: bool = False
    created_by: UUID | None = None
    created_at: datetime | None = None

    def can_be_edited_by(self, user_id: UUID, is_admin: bool = False) -> bool:
        """Creators and administrators may edit or delete a professional."""
        return is_admin or (self.created_by is not None and self.created_by == user_id)

    @property
    def website_url(self) -> str | None:
        """Website with an explicit scheme, suitable for a link."""
        if not self.website:
            return None
        if self.website.startswith(("http://", "https://")):
            return self.website
        return f"https://{self.website}"


@dataclass(frozen=True, slots=True)
class ProfessionalSummary:
    """Projection of a Professional used to enrich movements."""

    id: UUID
    display_name: str | None = None


@dataclass(frozen=True, slots=True)
class ProfessionalWithAddress:
    """Read-only value object: a professional with its resolved address row."""

    professional: Professional
    address: Address | None
    linked_horses: list[HorseSummary]


@dataclass(frozen=True, slots=True)
class ProfessionalCreation:
    """Outcome of a create request.

    ``created`` is False when an equivalent professional already existed and
    the caller should be redirected to it.
    """

    professional_id: UUID
    created: bool


@dataclass
class ProfessionalDraft:
    """Input of a create request, before deduplication."""

    display_name: str
    kind: ProfessionKind
    company_name: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    notes: str | None = None
    address: AddressDraft | None = None
