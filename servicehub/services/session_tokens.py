"""Session tokens handed out after a successful sign-in."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..domain.models import Account

logger = logging.getLogger(__name__)


class SessionTokenIssuer:
    """Mints signed, time-bound bearer tokens for authenticated accounts."""

    def __init__(
        self,
        secret_key: str,
        token_exp_minutes: int = 1440,
        algorithm: str = "HS256",
    ) -> None:
        if not secret_key:
            raise RuntimeError("SESSION_TOKEN_SECRET is not configured.")
        if secret_key == "change-me":
            logger.warning(
                "SESSION_TOKEN_SECRET is using the default value. Configure a real secret in production."
            )
        self._secret_key = secret_key
        self._token_exp_minutes = token_exp_minutes
        self._algorithm = algorithm

    def issue(self, account: Account) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "sub": str(account.id),
            "email": account.email,
            "iat": now,
            "exp": now + timedelta(minutes=self._token_exp_minutes),
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> Optional[int]:
        """
        Verify a token and return the account id it was issued for.

        Args:
            token: Token string from the Authorization header

        Returns:
            Account id if the token is valid and unexpired, None otherwise
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None
        try:
            return int(payload.get("sub"))
        except (TypeError, ValueError):
            return None
