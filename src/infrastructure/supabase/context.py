"""Per-request data context bound to one caller's Supabase token."""

from supabase import AsyncClient

from core.config import Settings, settings
from infrastructure.supabase.client import ClientFactory, create_client, execute
from infrastructure.supabase.repositories.supabase_address_repo import SupabaseAddressRepository
from infrastructure.supabase.repositories.supabase_horse_repo import SupabaseHorseRepository
from infrastructure.supabase.repositories.supabase_intervention_repo import (
    SupabaseInterventionRepository,
)
from infrastructure.supabase.repositories.supabase_movement_repo import (
    SupabaseHorseLocationRepository,
    SupabaseMovementRepository,
)
from infrastructure.supabase.repositories.supabase_photo_storage import SupabasePhotoStorage
from infrastructure.supabase.repositories.supabase_professional_repo import (
    SupabaseProfessionalRepository,
)
from infrastructure.supabase.repositories.supabase_profile_repo import SupabaseProfileRepository


class SupabaseDataContext:
    """IDataContext implementation over the Supabase SDK.

    The context opens one client acting with the caller's access token, so
    row-level security applies to every query and storage call. Without a
    token the client acts as the anonymous role.
    """

    def __init__(
        self,
        access_token: str | None = None,
        config: Settings = settings,
        client_factory: ClientFactory = create_client,
    ) -> None:
        self._access_token = access_token
        self._config = config
        self._client_factory = client_factory
        self._client: AsyncClient | None = None

    @property
    def client(self) -> AsyncClient:
        if self._client is None:
            raise RuntimeError("DataContext not initialized. Use as context manager.")
        return self._client

    @property
    def horses(self) -> SupabaseHorseRepository:
        return SupabaseHorseRepository(self.client)

    @property
    def movements(self) -> SupabaseMovementRepository:
        return SupabaseMovementRepository(self.client)

    @property
    def locations(self) -> SupabaseHorseLocationRepository:
        return SupabaseHorseLocationRepository(self.client)

    @property
    def professionals(self) -> SupabaseProfessionalRepository:
        return SupabaseProfessionalRepository(self.client)

    @property
    def addresses(self) -> SupabaseAddressRepository:
        return SupabaseAddressRepository(self.client)

    @property
    def interventions(self) -> SupabaseInterventionRepository:
        return SupabaseInterventionRepository(self.client)

    @property
    def profiles(self) -> SupabaseProfileRepository:
        return SupabaseProfileRepository(self.client)

    @property
    def photos(self) -> SupabasePhotoStorage:
        return SupabasePhotoStorage(self.client, self._config.storage_bucket)

    async def ping(self) -> None:
        """Run the cheapest query there is; raises when the gateway is unavailable."""
        await execute(self.client.table("profiles").select("id").limit(1))

    async def __aenter__(self) -> "SupabaseDataContext":
        """Open the client shared by every repository of the context."""
        self._client = await self._client_factory(self._access_token, self._config)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Close the PostgREST session of the client."""
        if self._client is not None:
            await self._client.postgrest.aclose()
        self._client = None
