"""Validation of gateway rows into domain entities."""

import dataclasses
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python

from core.exceptions import GatewayError

T = TypeVar("T")

Row = dict[str, Any]


@lru_cache
def _adapter(model: type[Any]) -> TypeAdapter[Any]:
    return TypeAdapter(model)


def parse_row(model: type[T], row: Mapping[str, Any], renames: Mapping[str, str] | None = None) -> T:
    """Validate one row into ``model`` (a dataclass).

    ``renames`` maps column names to field names where they differ.
    Columns with no matching field are dropped.
    """
    renames = renames or {}
    names = {f.name for f in dataclasses.fields(model)}  # type: ignore[arg-type]
    data = {}
    for column, value in row.items():
        name = renames.get(column, column)
        if name in names:
            data[name] = value
    try:
        return _adapter(model).validate_python(data)  # type: ignore[no-any-return]
    except PydanticValidationError as exc:
        raise GatewayError(
            f"Malformed {model.__name__} row returned by the gateway",
            gateway_code="MALFORMED_ROW",
        ) from exc


def parse_rows(
    model: type[T], rows: list[dict[str, Any]], renames: Mapping[str, str] | None = None
) -> list[T]:
    return [parse_row(model, row, renames) for row in rows]


def to_payload(values: Mapping[str, Any]) -> dict[str, Any]:
    """Render entity values (UUIDs, dates, enums) as JSON-ready column values."""
    return to_jsonable_python(dict(values))  # type: ignore[no-any-return]
