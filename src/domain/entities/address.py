"""Address domain entities and normalization helpers."""

import unicodedata
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

DEFAULT_COUNTRY = "FR"


def normalize_text(value: str | None) -> str:
    """Normalize a free-text field for soft-duplicate comparison."""
    return unicodedata.normalize("NFC", value or "").strip().casefold()


def address_key(
    line1: str | None,
    line2: str | None,
    postal_code: str | None,
    city: str | None,
    country: str | None,
) -> tuple[str, str, str, str, str]:
    """Build the normalized five-field key two addresses must share to be equal."""
    return (
        normalize_text(line1),
        normalize_text(line2),
        normalize_text(postal_code),
        normalize_text(city),
        normalize_text(country) or normalize_text(DEFAULT_COUNTRY),
    )


@dataclass
class Address:
    """Domain entity for a postal Address.

    Addresses are append-mostly: an equivalent existing row is reused
    rather than inserting a near-duplicate.
    """

    line1: str
    postal_code: str
    city: str
    id: UUID | None = None
    label: str | None = None
    line2: str | None = None
    country: str = DEFAULT_COUNTRY
    lat: float | None = None
    lng: float | None = None
    created_by: UUID | None = None
    created_at: datetime | None = None

    def normalized_key(self) -> tuple[str, str, str, str, str]:
        return address_key(self.line1, self.line2, self.postal_code, self.city, self.country)


@dataclass
class AddressDraft:
    """User-supplied address fields, not yet resolved to a stored Address."""

    line1: str = ""
    postal_code: str = ""
    city: str = ""
    label: str | None = None
    line2: str | None = None
    country: str | None = DEFAULT_COUNTRY
    lat: float | None = None
    lng: float | None = None

    REQUIRED_FIELDS = ("line1", "postal_code", "city")

    def missing_fields(self) -> list[str]:
        """Return the required fields left blank."""
        return [name for name in self.REQUIRED_FIELDS if not (getattr(self, name) or "").strip()]

    def is_empty(self) -> bool:
        """True when none of the required fields were filled in."""
        return len(self.missing_fields()) == len(self.REQUIRED_FIELDS)

    def normalized_key(self) -> tuple[str, str, str, str, str]:
        return address_key(self.line1, self.line2, self.postal_code, self.city, self.country)

    def to_address(self, created_by: UUID) -> Address:
        """Build the Address to insert, trimming every field."""
        return Address(
            label=(self.label or "").strip() or None,
            line1=self.line1.strip(),
            line2=(self.line2 or "").strip() or None,
            postal_code=self.postal_code.strip(),
            city=self.city.strip(),
            country=(self.country or DEFAULT_COUNTRY).strip() or DEFAULT_COUNTRY,
            lat=self.lat,
            lng=self.lng,
            created_by=created_by,
        )


@dataclass(frozen=True, slots=True)
class AddressSummary:
    """Projection of an Address used to enrich movements."""

    id: UUID
    label: str | None = None
    city: str | None = None

    @property
    def display(self) -> str:
        return " · ".join(part for part in (self.label, self.city) if part)


@dataclass(frozen=True, slots=True)
class AddressResolution:
    """Result of a find-or-create: the address id and whether it was inserted."""

    address_id: UUID
    created: bool
