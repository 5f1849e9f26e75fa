from __future__ import annotations

import logging
from typing import Optional

from ..domain.models import SocialProvider
from ..domain.ports.gateways import SocialClaims

logger = logging.getLogger(__name__)


class ClientAssertedTokenVerifier:
    """Accepts the email and name the client asserts without contacting the provider.

    Swap for a provider-backed implementation of ``ProviderTokenVerifier`` to
    check tokens server-side.
    """

    def verify_provider_token(
        self,
        provider: SocialProvider,
        token: Optional[str],
        asserted_email: str,
        asserted_name: Optional[str],
    ) -> SocialClaims:
        logger.debug("Accepting unverified %s token for %s", provider.value, asserted_email)
        return SocialClaims(email=asserted_email, name=asserted_name)
