"""Pydantic schemas for authentication and the current user."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Email and password."""

    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6, max_length=128)


class SessionResponse(BaseModel):
    """A session issued by the auth service.

    ``access_token`` is null after a sign-up awaiting email confirmation.
    """

    user_id: UUID
    email: str
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    token_type: str = "bearer"


class ProfileResponse(BaseModel):
    """The caller's profile."""

    id: UUID
    email: str
    display_name: str | None = None
    role: str
    is_admin: bool
    created_at: datetime | None = None
