from dataclasses import dataclass
from typing import Optional

from ..application.services.account_service import AccountService
from ..domain.ports.gateways import NotificationSink, PaymentProcessor, ProviderTokenVerifier
from ..domain.ports.persistence import PersistenceGateway
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..services.email_service import EmailService
from ..services.password_hasher import PasswordHasher
from ..services.session_tokens import SessionTokenIssuer
from ..services.social_verifier import ClientAssertedTokenVerifier
from ..services.stripe_service import StripeService
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: PersistenceGateway
    notification_sink: NotificationSink
    session_issuer: SessionTokenIssuer
    token_verifier: ProviderTokenVerifier
    payment_processor: PaymentProcessor
    account_service: AccountService

    def close(self) -> None:
        close = getattr(self.persistence, "close", None)
        if close is not None:
            close()


def build_container(
    settings: Settings,
    *,
    persistence: Optional[PersistenceGateway] = None,
    notification_sink: Optional[NotificationSink] = None,
    token_verifier: Optional[ProviderTokenVerifier] = None,
    payment_processor: Optional[PaymentProcessor] = None,
    account_service_options: Optional[dict] = None,
) -> ApplicationContainer:
    """Wire every collaborator from settings, letting callers substitute any of them."""
    persistence = persistence or SQLitePersistence(settings.database_path)
    notification_sink = notification_sink or EmailService(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_username=settings.smtp_username,
        smtp_password=settings.smtp_password,
        from_email=settings.smtp_from_email,
        timeout_seconds=settings.smtp_timeout_seconds,
        code_ttl_seconds=settings.verification_code_ttl_seconds,
    )
    token_verifier = token_verifier or ClientAssertedTokenVerifier()
    payment_processor = payment_processor or StripeService(settings.stripe_api_key)
    session_issuer = SessionTokenIssuer(
        secret_key=settings.session_token_secret,
        token_exp_minutes=settings.session_token_exp_minutes,
    )
    account_service = AccountService(
        persistence=persistence,
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        notification_sink=notification_sink,
        session_issuer=session_issuer,
        token_verifier=token_verifier,
        verification_required=settings.email_verification_enabled,
        verification_code_ttl_seconds=settings.verification_code_ttl_seconds,
        **(account_service_options or {}),
    )
    return ApplicationContainer(
        settings=settings,
        persistence=persistence,
        notification_sink=notification_sink,
        session_issuer=session_issuer,
        token_verifier=token_verifier,
        payment_processor=payment_processor,
        account_service=account_service,
    )
