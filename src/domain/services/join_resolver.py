"""Batched foreign-key enrichment of rows fetched from the gateway.

The gateway is queried once per relation (``id in (...)``) instead of once
per row. Lookups of different relations run concurrently and fail
independently: a failed relation marks its links as FAILED and the rows are
still returned, in their original order.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Generic, TypeVar
from uuid import UUID

import structlog

from domain.entities.link import Link, LinkStatus

logger = structlog.get_logger()

R = TypeVar("R")
V = TypeVar("V")


@dataclass(frozen=True)
class Relation(Generic[R, V]):
    """How to resolve one foreign key of a row type.

    ``fetch`` receives the distinct non-null keys and returns the related
    projections; ``key`` reads the id back from a projection.
    """

    name: str
    foreign_key: Callable[[R], UUID | None]
    fetch: Callable[[list[UUID]], Awaitable[Sequence[V]]]
    key: Callable[[V], UUID] = field(default=attrgetter("id"))


def distinct_keys(rows: Sequence[R], foreign_key: Callable[[R], UUID | None]) -> list[UUID]:
    """Non-null foreign keys of the rows, deduplicated in first-seen order."""
    keys = (foreign_key(row) for row in rows)
    return list(dict.fromkeys(key for key in keys if key is not None))


async def resolve_relations(
    rows: Sequence[R],
    relations: Sequence[Relation[R, Any]],
) -> list[dict[str, Link[Any]]]:
    """Resolve every relation for every row.

    Returns one mapping per row (same order as ``rows``) from relation name
    to its Link. A relation with no keys issues no request.
    """
    pending = [(relation, distinct_keys(rows, relation.foreign_key)) for relation in relations]
    pending = [(relation, keys) for relation, keys in pending if keys]

    results = await asyncio.gather(
        *(relation.fetch(keys) for relation, keys in pending),
        return_exceptions=True,
    )

    found: dict[str, dict[UUID, Any]] = {}
    failed: set[str] = set()
    for (relation, keys), result in zip(pending, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning(
                "enrichment_lookup_failed",
                relation=relation.name,
                key_count=len(keys),
                error_type=type(result).__name__,
                error=str(result),
            )
            failed.add(relation.name)
            continue
        found[relation.name] = {relation.key(value): value for value in result}

    resolved: list[dict[str, Link[Any]]] = []
    for row in rows:
        links: dict[str, Link[Any]] = {}
        for relation in relations:
            key = relation.foreign_key(row)
            if key is None:
                links[relation.name] = Link.absent()
            elif relation.name in failed:
                links[relation.name] = Link(key, LinkStatus.FAILED)
            elif key in found.get(relation.name, {}):
                links[relation.name] = Link(key, LinkStatus.RESOLVED, found[relation.name][key])
            else:
                links[relation.name] = Link(key, LinkStatus.MISSING)
        resolved.append(links)
    return resolved
