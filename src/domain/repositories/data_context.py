"""Data context protocol: the repositories available to one request."""

from typing import Protocol

from domain.repositories.address_repository import IAddressRepository
from domain.repositories.horse_repository import IHorseRepository
from domain.repositories.intervention_repository import IInterventionRepository
from domain.repositories.movement_repository import IHorseLocationRepository, IMovementRepository
from domain.repositories.photo_storage import IPhotoStorage
from domain.repositories.professional_repository import IProfessionalRepository
from domain.repositories.profile_repository import IProfileRepository


class IDataContext(Protocol):
    """Repositories bound to one caller's credentials.

    The gateway exposes no client-side transaction: every write is applied
    as soon as it is issued and there is nothing to commit or roll back.
    """

    horses: IHorseRepository
    movements: IMovementRepository
    locations: IHorseLocationRepository
    professionals: IProfessionalRepository
    addresses: IAddressRepository
    interventions: IInterventionRepository
    profiles: IProfileRepository
    photos: IPhotoStorage

    async def __aenter__(self) -> "IDataContext":
        """Open the connection to the gateway."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Close the connection to the gateway."""
        ...
