from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from ...domain.exceptions import (
    AccountError,
    BadRequestError,
    ConflictError,
    NotFoundError,
    ServerFaultError,
    UnauthorizedError,
)
from ...domain.models import Account, LoginEvent, Role, SocialProvider
from ...domain.ports.gateways import NotificationSink, ProviderTokenVerifier
from ...domain.ports.persistence import PersistenceGateway
from ...services.password_hasher import PasswordHasher
from ...services.session_tokens import SessionTokenIssuer
from ...services.verification_codes import generate_verification_code

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
VERIFICATION_REQUIRED = "Please verify your email before logging in"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(slots=True)
class Registration:
    account: Account
    requires_verification: bool


@dataclass(slots=True)
class AuthenticatedSession:
    account: Account
    token: str


class AccountService:
    """Drives an account from registration through verification to sign-in."""

    def __init__(
        self,
        persistence: PersistenceGateway,
        hasher: PasswordHasher,
        notification_sink: NotificationSink,
        session_issuer: SessionTokenIssuer,
        token_verifier: ProviderTokenVerifier,
        verification_required: bool = True,
        verification_code_ttl_seconds: int = 600,
        code_generator: Callable[[], str] = generate_verification_code,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._persistence = persistence
        self._hasher = hasher
        self._notifications = notification_sink
        self._sessions = session_issuer
        self._token_verifier = token_verifier
        self._verification_required = verification_required
        self._code_ttl = timedelta(seconds=verification_code_ttl_seconds)
        self._generate_code = code_generator
        self._clock = clock

    @property
    def verification_required(self) -> bool:
        return self._verification_required

    # ------------------------------------------------------------------
    def register(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        role: Role = Role.CUSTOMER,
        provider_type: Optional[str] = None,
    ) -> Registration:
        if self._persistence.find_by_email(email):
            raise ConflictError("Email already in use!")

        now = self._clock()
        account = Account(
            email=email,
            password_hash=self._hasher.hash(password),
            name=name,
            role=role,
            provider_type=provider_type if role.has_provider_type else None,
            created_at=now,
            updated_at=now,
        )
        if self._verification_required:
            account.start_verification(self._generate_code(), now + self._code_ttl, now)
        else:
            account.mark_verified(now)

        account = self._persistence.save(account)
        logger.info("Registered account %s (%s)", account.id, account.email)

        if self._verification_required:
            self._dispatch_code(account)
        return Registration(account=account, requires_verification=self._verification_required)

    def verify_email(self, email: Optional[str], code: Optional[str]) -> Account:
        if not email or not code:
            raise BadRequestError(
                "Email and verification code are required", reason="missing-fields"
            )

        account = self._require_account(email)
        now = self._clock()
        expiry = account.verification_code_expiry
        if expiry is not None and now >= expiry:
            raise BadRequestError(
                "Verification code has expired. Please request a new one.", reason="expired"
            )
        if account.verification_code is None or code != account.verification_code:
            raise BadRequestError("Invalid verification code", reason="mismatch")

        account.mark_verified(now)
        account = self._persistence.save(account)
        logger.info("Verified email for account %s", account.id)
        return account

    def resend_verification(self, email: Optional[str]) -> Account:
        if not email:
            raise BadRequestError("Email is required", reason="missing-fields")

        account = self._require_account(email)
        if account.email_verified:
            raise BadRequestError("Email is already verified", reason="already-verified")

        now = self._clock()
        account.start_verification(self._generate_code(), now + self._code_ttl, now)
        account = self._persistence.save(account)
        self._dispatch_code(account)
        return account

    def authenticate(self, email: str, password: str) -> Account:
        """Check credentials without opening a session."""
        account = self._persistence.find_by_email(email)
        if not account or not self._hasher.verify(password, account.password_hash):
            raise UnauthorizedError(INVALID_CREDENTIALS)
        if self._verification_required and not account.email_verified:
            raise UnauthorizedError(VERIFICATION_REQUIRED)
        return account

    def login(
        self,
        email: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuthenticatedSession:
        account = self.authenticate(email, password)
        return self._open_session(account, ip_address, user_agent)

    def social_authenticate(
        self,
        provider: SocialProvider,
        email: str,
        name: Optional[str],
        external_token: Optional[str],
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuthenticatedSession:
        try:
            claims = self._token_verifier.verify_provider_token(
                provider, external_token, email, name
            )
            account = self._persistence.find_by_email(claims.email)
            if account is None:
                account = self._provision_social_account(provider, claims.email, claims.name)
            return self._open_session(account, ip_address, user_agent)
        except AccountError:
            raise
        except Exception as exc:
            logger.exception("%s authentication failed for %s", provider.value, email)
            raise ServerFaultError(f"Authentication failed: {exc}") from exc

    # ------------------------------------------------------------------
    def get_account(self, email: str) -> Account:
        return self._require_account(email)

    def get_account_by_id(self, account_id: int) -> Account:
        account = self._persistence.find_by_id(account_id)
        if not account:
            raise NotFoundError("User not found")
        return account

    def update_profile(
        self,
        email: str,
        *,
        name: Optional[str] = None,
        provider_type: Optional[str] = None,
        preferred_language: Optional[str] = None,
        gender: Optional[str] = None,
        country: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> Account:
        account = self._require_account(email)
        if name is not None:
            account.name = name
        if provider_type is not None and account.role.has_provider_type:
            account.provider_type = provider_type
        if preferred_language is not None:
            account.preferred_language = preferred_language
        if gender is not None:
            account.gender = gender
        if country is not None:
            account.country = country
        if phone_number is not None:
            account.phone_number = phone_number
        account.updated_at = self._clock()
        return self._persistence.save(account)

    def list_accounts(self) -> List[Account]:
        return self._persistence.find_all()

    # ------------------------------------------------------------------
    def _require_account(self, email: str) -> Account:
        account = self._persistence.find_by_email(email)
        if not account:
            raise NotFoundError("User not found")
        return account

    def _provision_social_account(
        self, provider: SocialProvider, email: str, name: Optional[str]
    ) -> Account:
        now = self._clock()
        account = Account(
            email=email,
            password_hash=self._hasher.unusable_hash(),
            name=name,
            role=Role.CUSTOMER,
            created_at=now,
            updated_at=now,
        )
        account.mark_verified(now)
        try:
            account = self._persistence.save(account)
        except ConflictError:
            # A concurrent sign-in created the account first.
            existing = self._persistence.find_by_email(email)
            if existing is None:
                raise
            return existing
        logger.info("Provisioned %s account %s (%s)", provider.value, account.id, email)
        return account

    def _open_session(
        self,
        account: Account,
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> AuthenticatedSession:
        token = self._sessions.issue(account)
        try:
            self._persistence.record_login_event(
                LoginEvent(
                    account_id=account.id,
                    login_at=self._clock(),
                    ip_address=ip_address,
                    user_agent=user_agent,
                )
            )
        except Exception:
            logger.exception("Could not record login event for account %s", account.id)
        return AuthenticatedSession(account=account, token=token)

    def _dispatch_code(self, account: Account) -> None:
        try:
            sent = self._notifications.send_verification_code(
                account.email, account.verification_code
            )
        except Exception:
            logger.exception("Verification code dispatch to %s raised", account.email)
            return
        if not sent:
            logger.warning("Verification code for %s was not delivered", account.email)
