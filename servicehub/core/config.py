import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/servicehub.db")).resolve()
        self.email_verification_enabled = self._get_bool("EMAIL_VERIFICATION_ENABLED", default=True)
        self.verification_code_ttl_seconds = self._get_int("VERIFICATION_CODE_TTL_SECONDS", default=600)
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=12)
        self.session_token_secret = os.getenv("SESSION_TOKEN_SECRET", "change-me")
        self.session_token_exp_minutes = self._get_int("SESSION_TOKEN_EXP_MINUTES", default=60 * 24)
        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_username = os.getenv("SMTP_USERNAME", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL", "")
        self.smtp_timeout_seconds = self._get_int("SMTP_TIMEOUT_SECONDS", default=10)
        self.stripe_api_key = os.getenv("STRIPE_API_KEY")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_bool(key: str, default: Optional[bool] = None) -> bool:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise RuntimeError(f"Environment variable {key} must be a boolean")
