import re
from datetime import timedelta

import pytest

from servicehub.domain.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    ServerFaultError,
    UnauthorizedError,
)
from servicehub.domain.models import Role, SocialProvider

CODE_PATTERN = re.compile(r"^[1-9][0-9]{5}$")


def register(service, email="a@example.com", password="pw", **kwargs):
    kwargs.setdefault("name", "A")
    return service.register(email=email, password=password, **kwargs)


class TestRegister:
    def test_pending_verification_state(self, account_service, notification_sink, clock):
        registration = register(account_service)
        account = registration.account

        assert registration.requires_verification is True
        assert account.id is not None
        assert account.email_verified is False
        assert CODE_PATTERN.match(account.verification_code)
        assert account.created_at == clock.now
        assert account.verification_code_expiry - account.created_at == timedelta(seconds=600)
        assert notification_sink.sent == [("a@example.com", account.verification_code)]

    def test_password_is_hashed(self, account_service, container):
        register(account_service, password="s3cret")
        stored = container.persistence.find_by_email("a@example.com")
        assert stored.password_hash != "s3cret"
        assert stored.password_hash.startswith("$2")

    def test_without_verification(self, make_container, notification_sink):
        service = make_container(verification_required=False).account_service
        registration = register(service)

        assert registration.requires_verification is False
        assert registration.account.email_verified is True
        assert registration.account.verification_code is None
        assert registration.account.verification_code_expiry is None
        assert notification_sink.sent == []

    def test_duplicate_email_conflicts(self, account_service, container):
        register(account_service)
        with pytest.raises(ConflictError):
            register(account_service, password="other")
        assert len(container.persistence.find_all()) == 1

    def test_email_match_is_case_sensitive(self, account_service):
        register(account_service, email="a@example.com")
        registration = register(account_service, email="A@example.com")
        assert registration.account.email == "A@example.com"

    def test_notification_failure_keeps_account(self, account_service, notification_sink, container):
        notification_sink.fail = True
        registration = register(account_service)

        stored = container.persistence.find_by_email("a@example.com")
        assert stored.id == registration.account.id
        assert stored.verification_code is not None

        notification_sink.fail = False
        account_service.resend_verification("a@example.com")
        assert notification_sink.last_code_for("a@example.com") is not None

    def test_provider_type_only_kept_for_service_providers(self, account_service):
        customer = register(account_service, email="c@example.com", provider_type="CHEF").account
        provider = register(
            account_service,
            email="p@example.com",
            role=Role.SERVICE_PROVIDER,
            provider_type="CHEF",
        ).account

        assert customer.provider_type is None
        assert provider.provider_type == "CHEF"


class TestVerifyEmail:
    def test_correct_code_verifies(self, account_service, container):
        code = register(account_service).account.verification_code

        account = account_service.verify_email("a@example.com", code)

        assert account.email_verified is True
        stored = container.persistence.find_by_email("a@example.com")
        assert stored.email_verified is True
        assert stored.verification_code is None
        assert stored.verification_code_expiry is None

    def test_retry_after_success_is_mismatch(self, account_service):
        code = register(account_service).account.verification_code
        account_service.verify_email("a@example.com", code)

        with pytest.raises(BadRequestError) as excinfo:
            account_service.verify_email("a@example.com", code)
        assert excinfo.value.reason == "mismatch"

    def test_wrong_code(self, account_service):
        code = register(account_service).account.verification_code
        wrong = "100000" if code != "100000" else "100001"

        with pytest.raises(BadRequestError) as excinfo:
            account_service.verify_email("a@example.com", wrong)
        assert excinfo.value.reason == "mismatch"

    def test_expired_at_expiry_instant(self, account_service, clock):
        code = register(account_service).account.verification_code
        clock.advance(seconds=600)

        with pytest.raises(BadRequestError) as excinfo:
            account_service.verify_email("a@example.com", code)
        assert excinfo.value.reason == "expired"

    def test_valid_just_before_expiry(self, account_service, clock):
        code = register(account_service).account.verification_code
        clock.advance(seconds=599, microseconds=999999)

        assert account_service.verify_email("a@example.com", code).email_verified is True

    def test_unknown_email(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.verify_email("ghost@example.com", "123456")

    @pytest.mark.parametrize("email, code", [(None, "123456"), ("a@example.com", None), ("", "")])
    def test_missing_fields(self, account_service, email, code):
        with pytest.raises(BadRequestError) as excinfo:
            account_service.verify_email(email, code)
        assert excinfo.value.reason == "missing-fields"


class TestResendVerification:
    def test_replaces_pending_code(self, account_service, clock, container):
        codes = iter(["111111", "222222"])
        account_service._generate_code = lambda: next(codes)
        register(account_service)
        clock.advance(seconds=300)

        account_service.resend_verification("a@example.com")

        stored = container.persistence.find_by_email("a@example.com")
        assert stored.verification_code == "222222"
        assert stored.verification_code_expiry == clock.now + timedelta(seconds=600)
        assert stored.email_verified is False

        with pytest.raises(BadRequestError):
            account_service.verify_email("a@example.com", "111111")
        assert account_service.verify_email("a@example.com", "222222").email_verified

    def test_resend_sends_new_code(self, account_service, notification_sink):
        register(account_service)
        account_service.resend_verification("a@example.com")
        assert len(notification_sink.sent) == 2

    def test_already_verified(self, account_service):
        code = register(account_service).account.verification_code
        account_service.verify_email("a@example.com", code)

        with pytest.raises(BadRequestError) as excinfo:
            account_service.resend_verification("a@example.com")
        assert excinfo.value.reason == "already-verified"

    def test_unknown_email(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.resend_verification("ghost@example.com")


class TestLogin:
    def test_unknown_email_and_wrong_password_are_indistinguishable(self, make_container):
        service = make_container(verification_required=False).account_service
        register(service)

        with pytest.raises(UnauthorizedError) as unknown:
            service.login("ghost@example.com", "pw")
        with pytest.raises(UnauthorizedError) as wrong:
            service.login("a@example.com", "nope")
        assert unknown.value.message == wrong.value.message

    def test_unverified_account_rejected(self, account_service):
        register(account_service)
        with pytest.raises(UnauthorizedError) as excinfo:
            account_service.login("a@example.com", "pw")
        assert "verify" in excinfo.value.message

    def test_unverified_rejected_only_with_correct_password(self, account_service):
        register(account_service)
        with pytest.raises(UnauthorizedError) as excinfo:
            account_service.login("a@example.com", "wrong")
        assert excinfo.value.message == "Invalid credentials"

    def test_verified_account_gets_token(self, account_service, container):
        code = register(account_service).account.verification_code
        account_service.verify_email("a@example.com", code)

        session = account_service.login(
            "a@example.com", "pw", ip_address="10.0.0.1", user_agent="pytest"
        )

        assert session.token
        assert session.account.email == "a@example.com"
        events = container.persistence.list_login_events(session.account.id)
        assert [(e.ip_address, e.user_agent) for e in events] == [("10.0.0.1", "pytest")]

    def test_login_survives_login_event_failure(self, make_container, monkeypatch):
        container = make_container(verification_required=False)
        register(container.account_service)

        def broken(event):
            raise RuntimeError("disk I/O error")

        monkeypatch.setattr(container.persistence, "record_login_event", broken)
        session = container.account_service.login("a@example.com", "pw")

        assert session.token
        assert session.account.email == "a@example.com"

    def test_tokens_are_distinct_per_login(self, make_container):
        service = make_container(verification_required=False).account_service
        register(service)
        first = service.login("a@example.com", "pw").token
        second = service.login("a@example.com", "pw").token
        assert first != second


class TestSocialAuthenticate:
    def test_new_email_provisions_verified_customer(self, account_service, container):
        session = account_service.social_authenticate(
            SocialProvider.GOOGLE, "g@example.com", "Gee", "google-token"
        )

        account = session.account
        assert session.token
        assert account.role is Role.CUSTOMER
        assert account.email_verified is True
        assert account.name == "Gee"
        assert len(container.persistence.find_all()) == 1

    def test_provisioned_account_cannot_use_password_login(self, account_service):
        account_service.social_authenticate(SocialProvider.FACEBOOK, "f@example.com", "F", "tok")
        with pytest.raises(UnauthorizedError):
            account_service.login("f@example.com", "")

    def test_second_call_reuses_account_and_keeps_name(self, account_service, container):
        first = account_service.social_authenticate(
            SocialProvider.GOOGLE, "g@example.com", "Original", "t1"
        )
        second = account_service.social_authenticate(
            SocialProvider.INSTAGRAM, "g@example.com", "Renamed", "t2"
        )

        assert second.account.id == first.account.id
        assert container.persistence.find_by_email("g@example.com").name == "Original"
        assert len(container.persistence.find_all()) == 1

    def test_links_existing_registered_account(self, account_service):
        registered = register(account_service, email="r@example.com", name="Reg").account
        session = account_service.social_authenticate(
            SocialProvider.GOOGLE, "r@example.com", "Other", "tok"
        )
        assert session.account.id == registered.id
        assert session.account.name == "Reg"

    def test_unexpected_failure_is_server_fault(self, account_service, container, monkeypatch):
        def broken(email):
            raise RuntimeError("database is locked")

        monkeypatch.setattr(container.persistence, "find_by_email", broken)
        with pytest.raises(ServerFaultError) as excinfo:
            account_service.social_authenticate(SocialProvider.GOOGLE, "g@example.com", "G", "t")
        assert "database is locked" in excinfo.value.message

    def test_verifier_claims_are_used(self, account_service):
        class RewritingVerifier:
            def verify_provider_token(self, provider, token, asserted_email, asserted_name):
                from servicehub.domain.ports.gateways import SocialClaims

                return SocialClaims(email="verified@example.com", name="From Provider")

        account_service._token_verifier = RewritingVerifier()
        session = account_service.social_authenticate(
            SocialProvider.GOOGLE, "claimed@example.com", "Claimed", "tok"
        )
        assert session.account.email == "verified@example.com"
        assert session.account.name == "From Provider"


class TestProfile:
    def test_partial_update_ignores_none(self, account_service, clock):
        register(account_service, name="Before")
        clock.advance(minutes=5)

        account = account_service.update_profile(
            "a@example.com", country="IN", phone_number="+911234567890"
        )

        assert account.name == "Before"
        assert account.country == "IN"
        assert account.phone_number == "+911234567890"
        assert account.updated_at == clock.now
        assert account.updated_at > account.created_at

    def test_unknown_account(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.update_profile("ghost@example.com", name="x")
