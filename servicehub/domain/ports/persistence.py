from __future__ import annotations

from typing import List, Optional, Protocol

from ..models import Account, LoginEvent


class AccountRepository(Protocol):
    """Durable mapping from email to account record with unique emails."""

    def find_by_email(self, email: str) -> Optional[Account]:
        ...

    def find_by_id(self, account_id: int) -> Optional[Account]:
        ...

    def save(self, account: Account) -> Account:
        """Insert when ``account.id`` is None, update otherwise.

        Raises ``ConflictError`` when an insert collides with an existing email.
        """
        ...

    def find_all(self) -> List[Account]:
        ...


class LoginEventRepository(Protocol):
    """Append-only storage for sign-in audit records."""

    def record_login_event(self, event: LoginEvent) -> LoginEvent:
        ...

    def list_login_events(self, account_id: int) -> List[LoginEvent]:
        ...


class PersistenceGateway(AccountRepository, LoginEventRepository, Protocol):
    """Composite gateway combining every persistence concern used by the app."""

    pass
