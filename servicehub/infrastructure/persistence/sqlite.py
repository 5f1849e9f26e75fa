import dataclasses
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from ...domain.exceptions import ConflictError, NotFoundError
from ...domain.models import Account, LoginEvent, Role
from ...domain.ports.persistence import PersistenceGateway


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway."""

    def __init__(self, path: Union[Path, str]) -> None:
        if str(path) != ":memory:":
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS accounts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    name TEXT,
                    role TEXT NOT NULL DEFAULT 'CUSTOMER',
                    provider_type TEXT,
                    preferred_language TEXT,
                    gender TEXT,
                    country TEXT,
                    phone_number TEXT,
                    email_verified INTEGER NOT NULL DEFAULT 0,
                    verification_code TEXT,
                    verification_code_expiry TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS login_events (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    account_id INTEGER NOT NULL,
                    ip_address TEXT,
                    user_agent TEXT,
                    login_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_login_events_account_id
                    ON login_events(account_id);
                """
            )

    def close(self) -> None:
        self._conn.close()

    # AccountRepository API --------------------------------------------------
    def find_by_email(self, email: str) -> Optional[Account]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM accounts WHERE email = ?", (email,))
            row = cur.fetchone()
        return self._row_to_account(row) if row else None

    def find_by_id(self, account_id: int) -> Optional[Account]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM accounts WHERE id = ?", (account_id,))
            row = cur.fetchone()
        return self._row_to_account(row) if row else None

    def find_all(self) -> List[Account]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM accounts ORDER BY id ASC")
            rows = cur.fetchall()
        return [self._row_to_account(row) for row in rows]

    def save(self, account: Account) -> Account:
        if account.id is None:
            return self._insert(account)
        return self._update(account)

    def _insert(self, account: Account) -> Account:
        now = self._now()
        created_at = account.created_at or now
        updated_at = account.updated_at or created_at
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    """
                    INSERT INTO accounts (
                        email, password_hash, name, role, provider_type, preferred_language,
                        gender, country, phone_number, email_verified, verification_code,
                        verification_code_expiry, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        account.email,
                        account.password_hash,
                        account.name,
                        account.role.value,
                        account.provider_type,
                        account.preferred_language,
                        account.gender,
                        account.country,
                        account.phone_number,
                        int(account.email_verified),
                        account.verification_code,
                        self._format_datetime(account.verification_code_expiry),
                        self._format_datetime(created_at),
                        self._format_datetime(updated_at),
                    ),
                )
                account_id = cur.lastrowid
        except sqlite3.IntegrityError as exc:
            if "accounts.email" not in str(exc):
                raise
            raise ConflictError("Email already in use!") from exc
        return dataclasses.replace(
            account, id=account_id, created_at=created_at, updated_at=updated_at
        )

    def _update(self, account: Account) -> Account:
        updated_at = account.updated_at or self._now()
        with self._lock, self._conn:
            cur = self._conn.execute(
                """
                UPDATE accounts
                SET password_hash = ?, name = ?, role = ?, provider_type = ?,
                    preferred_language = ?, gender = ?, country = ?, phone_number = ?,
                    email_verified = ?, verification_code = ?, verification_code_expiry = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    account.password_hash,
                    account.name,
                    account.role.value,
                    account.provider_type,
                    account.preferred_language,
                    account.gender,
                    account.country,
                    account.phone_number,
                    int(account.email_verified),
                    account.verification_code,
                    self._format_datetime(account.verification_code_expiry),
                    self._format_datetime(updated_at),
                    account.id,
                ),
            )
        if cur.rowcount == 0:
            raise NotFoundError(f"Account {account.id} not found")
        return dataclasses.replace(account, updated_at=updated_at)

    # LoginEventRepository API -----------------------------------------------
    def record_login_event(self, event: LoginEvent) -> LoginEvent:
        with self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO login_events (account_id, ip_address, user_agent, login_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    event.account_id,
                    event.ip_address,
                    event.user_agent,
                    self._format_datetime(event.login_at),
                ),
            )
            event_id = cur.lastrowid
        return dataclasses.replace(event, id=event_id)

    def list_login_events(self, account_id: int) -> List[LoginEvent]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM login_events WHERE account_id = ? ORDER BY id ASC",
                (account_id,),
            )
            rows = cur.fetchall()
        return [
            LoginEvent(
                id=row["id"],
                account_id=row["account_id"],
                ip_address=row["ip_address"],
                user_agent=row["user_agent"],
                login_at=self._parse_datetime(row["login_at"]),
            )
            for row in rows
        ]

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _format_datetime(value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        try:
            result = datetime.fromisoformat(value)
        except ValueError:
            # Fallback for legacy formats without 'T'
            result = datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _optional_datetime(self, value: Any) -> Optional[datetime]:
        return self._parse_datetime(value) if value else None

    def _row_to_account(self, row: sqlite3.Row) -> Account:
        return Account(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            name=row["name"],
            role=Role(row["role"]),
            provider_type=row["provider_type"],
            preferred_language=row["preferred_language"],
            gender=row["gender"],
            country=row["country"],
            phone_number=row["phone_number"],
            email_verified=bool(row["email_verified"]),
            verification_code=row["verification_code"],
            verification_code_expiry=self._optional_datetime(row["verification_code_expiry"]),
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )
