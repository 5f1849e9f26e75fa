"""Pydantic schemas for account projections and profile updates."""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict

from ....domain.models import Role
from .common import CamelModel


class AccountResponse(CamelModel):
    """Account projection; the password hash and pending code are never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: Optional[str] = None
    role: Role
    provider_type: Optional[str] = None
    preferred_language: Optional[str] = None
    gender: Optional[str] = None
    country: Optional[str] = None
    phone_number: Optional[str] = None
    email_verified: bool
    created_at: datetime
    updated_at: datetime


class ProfileUpdateRequest(CamelModel):
    """Partial profile update; omitted or null fields are left unchanged."""

    name: Optional[str] = None
    provider_type: Optional[str] = None
    preferred_language: Optional[str] = None
    gender: Optional[str] = None
    country: Optional[str] = None
    phone_number: Optional[str] = None
