from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..models import SocialProvider


@dataclass(slots=True, frozen=True)
class SocialClaims:
    email: str
    name: Optional[str]


class NotificationSink(Protocol):
    """Delivers verification codes to a channel the account holder controls."""

    def send_verification_code(self, email: str, code: str) -> bool:
        """Best-effort delivery; returns False instead of raising on failure."""
        ...


class ProviderTokenVerifier(Protocol):
    """Checks a token issued by a social identity provider."""

    def verify_provider_token(
        self,
        provider: SocialProvider,
        token: Optional[str],
        asserted_email: str,
        asserted_name: Optional[str],
    ) -> SocialClaims:
        ...


class PaymentProcessor(Protocol):
    """External processor creating payment intents."""

    def create_payment_intent(self, amount: int, currency: str) -> str:
        """Return the processor's client secret for a new intent."""
        ...
