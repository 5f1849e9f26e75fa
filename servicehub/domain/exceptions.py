"""Errors raised by the account lifecycle and mapped to HTTP statuses at the edge."""

from typing import Optional


class AccountError(Exception):
    """Base class for every failure the identity core reports to callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConflictError(AccountError):
    status_code = 409


class NotFoundError(AccountError):
    status_code = 404


class BadRequestError(AccountError):
    """Malformed input or a verification attempt that cannot succeed.

    ``reason`` is one of ``missing-fields``, ``expired``, ``mismatch`` or
    ``already-verified``.
    """

    status_code = 400

    def __init__(self, message: str, reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.reason = reason


class UnauthorizedError(AccountError):
    status_code = 401


class ServerFaultError(AccountError):
    status_code = 500
