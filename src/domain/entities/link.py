"""Foreign-key enrichment result types."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar
from uuid import UUID

T = TypeVar("T")


class LinkStatus(StrEnum):
    """Outcome of resolving one foreign key after a primary fetch.

    ABSENT: the row carries no foreign key.
    RESOLVED: the related row was fetched.
    MISSING: the key is set but the related row was not returned (deleted or
        hidden by access rules).
    FAILED: the batched lookup for this relation raised.
    """

    ABSENT = "absent"
    RESOLVED = "resolved"
    MISSING = "missing"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Link(Generic[T]):
    """A foreign key together with its resolved projection, if any."""

    id: UUID | None
    status: LinkStatus
    value: T | None = None

    @property
    def is_resolved(self) -> bool:
        return self.status is LinkStatus.RESOLVED

    @classmethod
    def absent(cls) -> "Link[T]":
        return cls(id=None, status=LinkStatus.ABSENT)
