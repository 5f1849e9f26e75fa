"""Shared fixtures: settings on a temporary database, fake collaborators and a test client."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from servicehub.core.app_factory import create_application
from servicehub.core.config import Settings
from servicehub.core.container import build_container

SESSION_SECRET = "test-session-secret-0123456789-abcdefghijklmnop"

_ENV_KEYS = (
    "EMAIL_VERIFICATION_ENABLED",
    "VERIFICATION_CODE_TTL_SECONDS",
    "SESSION_TOKEN_EXP_MINUTES",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USERNAME",
    "SMTP_PASSWORD",
    "SMTP_FROM_EMAIL",
    "STRIPE_API_KEY",
    "CORS_ALLOW_ORIGINS",
)


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class RecordingNotificationSink:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send_verification_code(self, email, code):
        if self.fail:
            raise ConnectionError("SMTP server unreachable")
        self.sent.append((email, code))
        return True

    def last_code_for(self, email):
        codes = [code for recipient, code in self.sent if recipient == email]
        return codes[-1] if codes else None


class FakePaymentProcessor:
    def __init__(self):
        self.calls = []

    def create_payment_intent(self, amount, currency):
        self.calls.append((amount, currency))
        return f"pi_{amount}_{currency}_secret_test"


@pytest.fixture
def settings(tmp_path, monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "servicehub.db"))
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("SESSION_TOKEN_SECRET", SESSION_SECRET)
    return Settings()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notification_sink():
    return RecordingNotificationSink()


@pytest.fixture
def payment_processor():
    return FakePaymentProcessor()


@pytest.fixture
def make_container(settings, clock, notification_sink, payment_processor):
    containers = []

    def factory(verification_required=True):
        settings.email_verification_enabled = verification_required
        container = build_container(
            settings,
            notification_sink=notification_sink,
            payment_processor=payment_processor,
            account_service_options={"clock": clock},
        )
        containers.append(container)
        return container

    yield factory
    for container in containers:
        container.close()


@pytest.fixture
def container(make_container):
    return make_container()


@pytest.fixture
def account_service(container):
    return container.account_service


@pytest.fixture
def client(container):
    app = create_application(container=container)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def no_verification_client(make_container):
    """Client for a deployment with email verification switched off."""
    app = create_application(container=make_container(verification_required=False))
    with TestClient(app) as test_client:
        yield test_client
