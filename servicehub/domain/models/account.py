"""Account domain model for marketplace customers and service providers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    CUSTOMER = "CUSTOMER"
    SERVICE_PROVIDER = "SERVICE_PROVIDER"

    @property
    def has_provider_type(self) -> bool:
        """Only service providers carry a provider type (chef, bartender, ...)."""
        return self is Role.SERVICE_PROVIDER


class SocialProvider(str, Enum):
    GOOGLE = "google"
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"


@dataclass(slots=True)
class Account:
    """
    Identity record for one user of the platform.

    Attributes:
        email: Unique email address, immutable once stored
        password_hash: bcrypt digest; OAuth-provisioned accounts hold the digest of a random secret
        id: Store-assigned identifier, ``None`` until the account is first saved
        role: Customer or service provider
        provider_type: Sub-classification of a service provider
        email_verified: Whether control of the email address has been proven
        verification_code: Outstanding verification code, ``None`` when nothing is pending
        verification_code_expiry: Instant at which ``verification_code`` stops being accepted
        created_at: Creation timestamp
        updated_at: Last mutation timestamp
    """

    email: str
    password_hash: str
    id: Optional[int] = None
    name: Optional[str] = None
    role: Role = Role.CUSTOMER
    provider_type: Optional[str] = None
    preferred_language: Optional[str] = None
    gender: Optional[str] = None
    country: Optional[str] = None
    phone_number: Optional[str] = None
    email_verified: bool = False
    verification_code: Optional[str] = None
    verification_code_expiry: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def start_verification(self, code: str, expires_at: datetime, now: datetime) -> None:
        self.email_verified = False
        self.verification_code = code
        self.verification_code_expiry = expires_at
        self.updated_at = now

    def mark_verified(self, now: datetime) -> None:
        self.email_verified = True
        self.verification_code = None
        self.verification_code_expiry = None
        self.updated_at = now

    def __repr__(self) -> str:
        return f"<Account id={self.id} email={self.email} role={self.role.value} verified={self.email_verified}>"
