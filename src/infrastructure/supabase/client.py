"""Supabase SDK clients and execution of the requests built with them."""

from collections.abc import Awaitable, Callable, Iterable
from typing import Any
from uuid import UUID

import httpx
import structlog
from supabase import AsyncClient, AsyncClientOptions, PostgrestAPIError, acreate_client

from core.config import Settings, settings
from core.exceptions import NetworkError
from infrastructure.supabase.errors import translate_api_error
from infrastructure.supabase.rows import Row

logger = structlog.get_logger()

ClientFactory = Callable[[str | None, Settings], Awaitable[AsyncClient]]


def client_options(access_token: str | None, config: Settings = settings) -> AsyncClientOptions:
    """Options of a short-lived, per-request client.

    Sessions are neither persisted nor refreshed. With an access token, every
    PostgREST and Storage call carries it as the bearer; without one the
    client acts as the anonymous role.
    """
    headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
    return AsyncClientOptions(
        headers=headers,
        auto_refresh_token=False,
        persist_session=False,
        postgrest_client_timeout=config.gateway_timeout_seconds,
        storage_client_timeout=int(config.gateway_timeout_seconds),
    )


async def create_client(access_token: str | None = None, config: Settings = settings) -> AsyncClient:
    """Build a client for the project, acting with ``access_token``."""
    return await acreate_client(
        config.supabase_url,
        config.supabase_anon_key,
        options=client_options(access_token, config),
    )


async def execute(request: Any, function: str | None = None) -> Any:
    """Run a built request and return its data. Calls are never retried."""
    try:
        response = await request.execute()
    except PostgrestAPIError as exc:
        raise translate_api_error(exc, function=function) from exc
    except httpx.TransportError as exc:
        logger.warning("gateway_unreachable", function=function, error=str(exc))
        raise NetworkError(f"Gateway unreachable: {exc}") from exc
    return response.data


async def select_by_ids(
    client: AsyncClient, table: str, columns: str, ids: Iterable[UUID | None]
) -> list[Row]:
    """Batched lookup by primary key. An empty id set makes no request."""
    unique = list(dict.fromkeys(str(i) for i in ids if i is not None))
    if not unique:
        return []
    return await execute(client.table(table).select(columns).in_("id", unique))  # type: ignore[no-any-return]
