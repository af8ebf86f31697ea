"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest


class FakeDataContext:
    """Fake data context with a mock for every repository."""

    def __init__(self) -> None:
        self.horses = AsyncMock()
        self.movements = AsyncMock()
        self.locations = AsyncMock()
        self.professionals = AsyncMock()
        self.addresses = AsyncMock()
        self.interventions = AsyncMock()
        self.profiles = AsyncMock()
        self.photos = AsyncMock()
        self.opened = 0
        self.closed = 0

    async def __aenter__(self) -> "FakeDataContext":
        self.opened += 1
        return self

    async def __aexit__(self, *args: Any) -> None:
        self.closed += 1


@pytest.fixture
def ctx() -> FakeDataContext:
    """Create a fresh FakeDataContext."""
    return FakeDataContext()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def actor_id() -> UUID:
    """A random actor ID (distinct from user_id)."""
    return uuid4()
