"""Binary storage protocol for horse photos."""

from typing import Protocol


class IPhotoStorage(Protocol):
    """Storage bucket holding horse photos."""

    async def upload(
        self, path: str, data: bytes, content_type: str, overwrite: bool = True
    ) -> str:
        """Store bytes at path and return the stored path."""
        ...

    async def create_signed_url(self, path: str, ttl_seconds: int) -> str | None:
        """Return a time-limited read URL, None when the object is unknown."""
        ...
