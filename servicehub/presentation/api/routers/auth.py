"""API router for registration, email verification and sign-in."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status

from ....application.services.account_service import AccountService, AuthenticatedSession
from ....core.dependencies import get_account_service
from ....domain.models import SocialProvider
from ...api.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    ResendVerificationRequest,
    SessionResponse,
    SocialLoginRequest,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from ...api.schemas.common import MessageResponse

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    account_service: AccountService = Depends(get_account_service),
) -> RegisterResponse:
    """Register a new account and send a verification code when required."""
    registration = account_service.register(
        email=payload.email,
        password=payload.password,
        name=payload.name,
        role=payload.role,
        provider_type=payload.provider_type,
    )
    if registration.requires_verification:
        message = "Registration initiated! Please check your email for verification code."
    else:
        message = "Registration successful. Email verification is disabled."

    return RegisterResponse(
        user_id=registration.account.id,
        email=registration.account.email,
        message=message,
        requires_verification=registration.requires_verification,
    )


@router.post("/verify-email", response_model=VerifyEmailResponse)
def verify_email(
    payload: VerifyEmailRequest,
    account_service: AccountService = Depends(get_account_service),
) -> VerifyEmailResponse:
    account = account_service.verify_email(payload.email, payload.verification_code)
    return VerifyEmailResponse(
        user_id=account.id,
        email=account.email,
        message="Email verified successfully! You can now login.",
    )


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification(
    payload: ResendVerificationRequest,
    account_service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    account_service.resend_verification(payload.email)
    return MessageResponse(message="New verification code sent to your email")


@router.post("/login", response_model=SessionResponse)
def login(
    payload: LoginRequest,
    request: Request,
    account_service: AccountService = Depends(get_account_service),
) -> SessionResponse:
    session = account_service.login(
        payload.email,
        payload.password,
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return _session_response(session, "Login successful!")


@router.post("/logout", response_model=MessageResponse)
def logout() -> MessageResponse:
    """Sessions are not tracked server-side, so there is nothing to invalidate."""
    return MessageResponse(message="Logout successful!")


@router.post("/{provider}", response_model=SessionResponse)
def social_login(
    provider: SocialProvider,
    payload: SocialLoginRequest,
    request: Request,
    account_service: AccountService = Depends(get_account_service),
) -> SessionResponse:
    session = account_service.social_authenticate(
        provider,
        email=payload.email,
        name=payload.name,
        external_token=payload.token,
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return _session_response(session, f"{provider.value.capitalize()} authentication successful!")


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _session_response(session: AuthenticatedSession, message: str) -> SessionResponse:
    account = session.account
    return SessionResponse(
        message=message,
        token=session.token,
        user_id=account.id,
        email=account.email,
        name=account.name,
        role=account.role,
        provider_type=account.provider_type,
    )
