"""Horse photo storage backed by a Supabase Storage bucket."""

import httpx
import structlog
from supabase import AsyncClient, StorageException

from core.exceptions import NetworkError
from infrastructure.supabase.errors import storage_status, translate_storage_error

logger = structlog.get_logger()


class SupabasePhotoStorage:
    """IPhotoStorage bound to one bucket."""

    def __init__(self, client: AsyncClient, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    async def upload(
        self, path: str, data: bytes, content_type: str, overwrite: bool = True
    ) -> str:
        """Store ``data`` at ``path`` and return the path."""
        options = {"content-type": content_type, "x-upsert": "true" if overwrite else "false"}
        try:
            await self._client.storage.from_(self._bucket).upload(path, data, options)
        except StorageException as exc:
            raise translate_storage_error(exc) from exc
        except httpx.TransportError as exc:
            logger.warning("storage_unreachable", path=path, error=str(exc))
            raise NetworkError(f"Storage unreachable: {exc}") from exc
        logger.info("storage_object_uploaded", bucket=self._bucket, path=path, size=len(data))
        return path

    async def create_signed_url(self, path: str, ttl_seconds: int) -> str | None:
        """Return an absolute signed URL, or None when the object does not exist."""
        try:
            signed = await self._client.storage.from_(self._bucket).create_signed_url(
                path, ttl_seconds
            )
        except StorageException as exc:
            if storage_status(exc) == "404":
                return None
            raise translate_storage_error(exc) from exc
        except httpx.TransportError as exc:
            logger.warning("storage_unreachable", path=path, error=str(exc))
            raise NetworkError(f"Storage unreachable: {exc}") from exc
        return signed.get("signedURL") or signed.get("signedUrl")  # type: ignore[no-any-return]
