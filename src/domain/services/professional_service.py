"""Professional directory service with duplicate detection."""

import asyncio
from collections.abc import Callable
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import (
    AccessDeniedError,
    AddressNotFoundError,
    AppException,
    DuplicateProfessionalError,
    ProcedureUnavailableError,
    UniqueViolationError,
    ValidationError,
)
from domain.entities.address import Address, AddressDraft, AddressResolution
from domain.entities.professional import (
    MIN_PHONE_DIGITS,
    Professional,
    ProfessionalCreation,
    ProfessionalDraft,
    ProfessionalWithAddress,
    ProfessionKind,
    phone_digits,
)
from domain.repositories.data_context import IDataContext
from domain.services.address_service import AddressService

logger = structlog.get_logger()


def _clean(value: str | None) -> str | None:
    """Trim optional text; blank becomes None."""
    if value is None:
        return None
    return value.strip() or None


async def _no_match() -> None:
    return None


class ProfessionalService:
    """Service layer for the professional directory."""

    def __init__(
        self,
        context_factory: Callable[[], IDataContext],
        address_service: AddressService | None = None,
        use_rpc: bool = settings.professional_rpc_enabled,
    ) -> None:
        self._context_factory = context_factory
        self._addresses = address_service or AddressService(context_factory)
        self._use_rpc = use_rpc

    async def search(
        self, query: str | None = None, kind: ProfessionKind | None = None
    ) -> list[Professional]:
        async with self._context_factory() as ctx:
            return await ctx.professionals.search(query, kind)

    async def list_with_address(self) -> list[Professional]:
        """Professionals that can be chosen as a movement destination."""
        async with self._context_factory() as ctx:
            return await ctx.professionals.list_with_address()

    async def get(self, professional_id: UUID) -> ProfessionalWithAddress:
        """Get a professional with its address and the horses linked to it."""
        async with self._context_factory() as ctx:
            professional = await ctx.professionals.get(professional_id)
            address, horses = await asyncio.gather(
                self._load_address(ctx, professional),
                ctx.professionals.list_linked_horses(professional_id),
            )
            return ProfessionalWithAddress(
                professional=professional, address=address, linked_horses=horses
            )

    async def create(self, actor_id: UUID | None, draft: ProfessionalDraft) -> ProfessionalCreation:
        """Create a professional unless an equivalent one exists.

        An existing professional of the same kind with the same email (first)
        or the same phone digits (second) is returned with ``created=False``.
        """
        if actor_id is None:
            raise AccessDeniedError("You must be logged in")
        display_name = self._validate_display_name(draft.display_name)
        phone = self._validate_phone(draft.phone)
        email = _clean(draft.email)
        address = self._validate_address(draft.address)
        digits = phone_digits(phone)

        professional = Professional(
            display_name=display_name,
            kind=draft.kind,
            company_name=_clean(draft.company_name),
            email=email,
            phone=phone,
            website=_clean(draft.website),
            notes=_clean(draft.notes),
            created_by=actor_id,
        )

        async with self._context_factory() as ctx:
            existing = await self._find_existing(ctx, draft.kind, email, digits)
            if existing is not None:
                logger.info(
                    "professional_duplicate_redirect",
                    professional_id=str(existing),
                    kind=draft.kind.value,
                )
                return ProfessionalCreation(professional_id=existing, created=False)

            try:
                professional_id = await self._insert(ctx, actor_id, professional, address)
            except UniqueViolationError as exc:
                existing = await self._find_existing(ctx, draft.kind, email, digits)
                if existing is None:
                    raise DuplicateProfessionalError() from exc
                logger.info(
                    "professional_duplicate_redirect",
                    professional_id=str(existing),
                    kind=draft.kind.value,
                    after_conflict=True,
                )
                return ProfessionalCreation(professional_id=existing, created=False)

        logger.info("professional_created", professional_id=str(professional_id), kind=draft.kind.value)
        return ProfessionalCreation(professional_id=professional_id, created=True)

    async def update(
        self,
        professional_id: UUID,
        actor_id: UUID,
        is_admin: bool = False,
        *,
        display_name: str | None = None,
        kind: ProfessionKind | None = None,
        company_name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        website: str | None = None,
        notes: str | None = None,
        is_verified: bool | None = None,
        address: AddressDraft | None = None,
        clear_address: bool = False,
    ) -> Professional:
        """Update a professional. Creator or administrator only.

        Omitted fields are left unchanged; an empty string clears an optional
        text field. Only an administrator may change ``is_verified``. The
        address is left alone when omitted, detached when ``clear_address`` is
        set or every address field is blank, and otherwise resolved through
        find-or-create.
        """
        async with self._context_factory() as ctx:
            professional = await ctx.professionals.get(professional_id)
            if not professional.can_be_edited_by(actor_id, is_admin):
                raise AccessDeniedError("Only the creator or an administrator can edit this professional")
            if is_verified is not None and is_verified != professional.is_verified:
                if not is_admin:
                    raise AccessDeniedError("Only an administrator can change the verification status")
                professional.is_verified = is_verified

            if display_name is not None:
                professional.display_name = self._validate_display_name(display_name)
            if kind is not None:
                professional.kind = kind
            if phone is not None:
                professional.phone = self._validate_phone(phone)
            if company_name is not None:
                professional.company_name = _clean(company_name)
            if email is not None:
                professional.email = _clean(email)
            if website is not None:
                professional.website = _clean(website)
            if notes is not None:
                professional.notes = _clean(notes)

            if clear_address:
                professional.address_id = None
            elif address is not None:
                draft = self._validate_address(address)
                if draft is None:
                    professional.address_id = None
                else:
                    resolution = await self._addresses.resolve(ctx, actor_id, draft)
                    professional.address_id = resolution.address_id

            updated = await ctx.professionals.update(professional)
            logger.info("professional_updated", professional_id=str(professional_id))
            return updated

    async def delete(self, professional_id: UUID, actor_id: UUID, is_admin: bool = False) -> None:
        """Delete a professional. Creator or administrator only."""
        async with self._context_factory() as ctx:
            professional = await ctx.professionals.get(professional_id)
            if not professional.can_be_edited_by(actor_id, is_admin):
                raise AccessDeniedError("Only the creator or an administrator can delete this professional")
            await ctx.professionals.delete(professional_id)
            logger.info("professional_deleted", professional_id=str(professional_id))

    async def _insert(
        self,
        ctx: IDataContext,
        actor_id: UUID,
        professional: Professional,
        address: AddressDraft | None,
    ) -> UUID:
        if self._use_rpc:
            try:
                return await ctx.professionals.create_with_address(professional, address)
            except ProcedureUnavailableError as exc:
                logger.warning("professional_rpc_unavailable", function=exc.function)

        resolution: AddressResolution | None = None
        if address is not None:
            resolution = await self._addresses.resolve(ctx, actor_id, address)
            professional.address_id = resolution.address_id
        try:
            created = await ctx.professionals.create(professional)
        except AppException:
            if resolution is not None and resolution.created:
                logger.warning("orphan_address_possible", address_id=str(resolution.address_id))
            raise
        return created.id  # type: ignore[return-value]

    @staticmethod
    async def _find_existing(
        ctx: IDataContext, kind: ProfessionKind, email: str | None, digits: str
    ) -> UUID | None:
        by_email, by_phone = await asyncio.gather(
            ctx.professionals.find_by_kind_and_email(kind, email) if email else _no_match(),
            ctx.professionals.find_by_kind_and_phone(kind, digits) if digits else _no_match(),
        )
        return by_email or by_phone

    @staticmethod
    async def _load_address(ctx: IDataContext, professional: Professional) -> Address | None:
        if professional.address_id is None:
            return None
        try:
            return await ctx.addresses.get(professional.address_id)
        except AddressNotFoundError:
            logger.warning(
                "professional_address_unreadable",
                professional_id=str(professional.id),
                address_id=str(professional.address_id),
            )
            return None

    @staticmethod
    def _validate_display_name(display_name: str) -> str:
        cleaned = (display_name or "").strip()
        if not cleaned:
            raise ValidationError("Display name is required", field="display_name")
        return cleaned

    @staticmethod
    def _validate_phone(phone: str | None) -> str | None:
        cleaned = _clean(phone)
        if cleaned is not None and len(phone_digits(cleaned)) < MIN_PHONE_DIGITS:
            raise ValidationError(
                f"Phone number must contain at least {MIN_PHONE_DIGITS} digits", field="phone"
            )
        return cleaned

    @staticmethod
    def _validate_address(draft: AddressDraft | None) -> AddressDraft | None:
        """Return the draft when complete, None when blank; partial input is rejected."""
        if draft is None or draft.is_empty():
            return None
        AddressService.validate(draft)
        return draft
