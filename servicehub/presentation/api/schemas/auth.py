"""Pydantic schemas for the authentication endpoints."""

from typing import Optional

from pydantic import Field

from ....domain.models import Role
from .common import CamelModel, EmailAddress


class RegisterRequest(CamelModel):
    """Request schema for account registration."""

    email: EmailAddress
    password: str = Field(..., min_length=1)
    name: Optional[str] = None
    role: Role = Role.CUSTOMER
    provider_type: Optional[str] = None


class RegisterResponse(CamelModel):
    """Response schema for account registration."""

    user_id: int
    email: str
    message: str
    requires_verification: bool


class VerifyEmailRequest(CamelModel):
    """Request schema for email verification; missing fields are reported by the service."""

    email: Optional[EmailAddress] = None
    verification_code: Optional[str] = None


class VerifyEmailResponse(CamelModel):
    user_id: int
    email: str
    message: str


class ResendVerificationRequest(CamelModel):
    email: Optional[EmailAddress] = None


class LoginRequest(CamelModel):
    """Request schema for password login."""

    email: EmailAddress
    password: str


class SocialLoginRequest(CamelModel):
    """Request schema for Google, Facebook and Instagram sign-in."""

    token: Optional[str] = None
    email: EmailAddress
    name: Optional[str] = None


class SessionResponse(CamelModel):
    """Response schema for a successful sign-in."""

    message: str
    token: str
    user_id: int
    email: str
    name: Optional[str] = None
    role: Role
    provider_type: Optional[str] = None
