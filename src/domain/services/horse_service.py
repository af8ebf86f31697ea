"""Horse service layer: owner-scoped records and photos."""

import re
from collections.abc import Callable
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import AccessDeniedError, ValidationError
from domain.entities.horse import Horse, HorseDetail, HorseSex
from domain.repositories.data_context import IDataContext

logger = structlog.get_logger()

EDITABLE_FIELDS = frozenset({"name", "birthdate", "sex", "sire_number"})

_WHITESPACE = re.compile(r"\s+")


def photo_object_path(owner_id: UUID, horse_id: UUID, filename: str, now: datetime) -> str:
    """Storage path of a new photo: ``{owner}/{horse}/{epoch_ms}_{filename}``."""
    epoch_ms = int(now.timestamp() * 1000)
    safe_name = _WHITESPACE.sub("_", filename.strip()) or "photo"
    return f"{owner_id}/{horse_id}/{epoch_ms}_{safe_name}"


class HorseService:
    """Service layer for horses. Only the owner may change a horse."""

    def __init__(
        self,
        context_factory: Callable[[], IDataContext],
        signed_url_ttl: int = settings.signed_url_ttl_seconds,
        photo_max_bytes: int = settings.photo_max_bytes,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._context_factory = context_factory
        self._signed_url_ttl = signed_url_ttl
        self._photo_max_bytes = photo_max_bytes
        self._clock = clock

    async def list_for_owner(self, owner_id: UUID) -> list[Horse]:
        async with self._context_factory() as ctx:
            return await ctx.horses.list_for_owner(owner_id)

    async def get(self, horse_id: UUID) -> HorseDetail:
        """Get a horse and sign its photo URL."""
        async with self._context_factory() as ctx:
            horse = await ctx.horses.get(horse_id)
            photo_url = None
            if horse.photo_path:
                photo_url = await ctx.photos.create_signed_url(horse.photo_path, self._signed_url_ttl)
            return HorseDetail(horse=horse, photo_url=photo_url)

    async def create(
        self,
        owner_id: UUID,
        name: str,
        birthdate: date | None = None,
        sex: HorseSex | None = None,
        sire_number: str | None = None,
    ) -> Horse:
        horse = Horse(
            owner_id=owner_id,
            name=self._validate_name(name),
            birthdate=birthdate,
            sex=sex,
            sire_number=(sire_number or "").strip() or None,
        )
        async with self._context_factory() as ctx:
            created = await ctx.horses.create(horse)
        logger.info("horse_created", horse_id=str(created.id))
        return created

    async def update(self, horse_id: UUID, user_id: UUID, changes: dict[str, Any]) -> Horse:
        """Apply a partial patch to a horse owned by ``user_id``.

        Keys of ``changes`` are horse fields; a None value clears an optional
        field. The creation timestamp is never modified.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Field cannot be edited: {sorted(unknown)[0]}", field=sorted(unknown)[0])

        async with self._context_factory() as ctx:
            horse = await self._get_owned(ctx, horse_id, user_id)
            if "name" in changes:
                horse.name = self._validate_name(changes["name"])
            if "birthdate" in changes:
                horse.birthdate = changes["birthdate"]
            if "sex" in changes:
                horse.sex = changes["sex"]
            if "sire_number" in changes:
                horse.sire_number = (changes["sire_number"] or "").strip() or None
            updated = await ctx.horses.update(horse)
        logger.info("horse_updated", horse_id=str(horse_id), fields=sorted(changes))
        return updated

    async def upload_photo(
        self,
        horse_id: UUID,
        user_id: UUID,
        data: bytes,
        filename: str,
        content_type: str | None,
    ) -> HorseDetail:
        """Store a new photo for the horse and return it with a fresh signed URL."""
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError("Photo must be an image", field="photo")
        if not data:
            raise ValidationError("Photo is empty", field="photo")
        if len(data) > self._photo_max_bytes:
            raise ValidationError(
                f"Photo exceeds {self._photo_max_bytes // (1024 * 1024)} MB", field="photo"
            )

        async with self._context_factory() as ctx:
            horse = await self._get_owned(ctx, horse_id, user_id)
            path = photo_object_path(horse.owner_id, horse_id, filename, self._clock())
            await ctx.photos.upload(path, data, content_type, overwrite=True)
            try:
                horse = await ctx.horses.set_photo(horse_id, user_id, path)
            except Exception:
                logger.warning("horse_photo_orphaned", horse_id=str(horse_id), path=path)
                raise
            photo_url = await ctx.photos.create_signed_url(path, self._signed_url_ttl)

        logger.info("horse_photo_uploaded", horse_id=str(horse_id), size=len(data))
        return HorseDetail(horse=horse, photo_url=photo_url)

    async def delete(self, horse_id: UUID, user_id: UUID) -> None:
        async with self._context_factory() as ctx:
            await self._get_owned(ctx, horse_id, user_id)
            await ctx.horses.delete(horse_id, user_id)
        logger.info("horse_deleted", horse_id=str(horse_id))

    @staticmethod
    async def _get_owned(ctx: IDataContext, horse_id: UUID, user_id: UUID) -> Horse:
        horse = await ctx.horses.get(horse_id)
        if not horse.is_owned_by(user_id):
            raise AccessDeniedError("Only the owner can modify this horse")
        return horse

    @staticmethod
    def _validate_name(name: str | None) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Name is required", field="name")
        return cleaned
