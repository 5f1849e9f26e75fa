from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBasic,
    HTTPBasicCredentials,
    HTTPBearer,
)

from ...application.services.account_service import AccountService
from ...core.dependencies import get_account_service, get_session_issuer
from ...domain.exceptions import NotFoundError, UnauthorizedError
from ...domain.models import Account
from ...services.session_tokens import SessionTokenIssuer

_basic_scheme = HTTPBasic(auto_error=False)
_bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Basic"},
    )


def require_account(
    basic: Optional[HTTPBasicCredentials] = Depends(_basic_scheme),
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    account_service: AccountService = Depends(get_account_service),
    session_issuer: SessionTokenIssuer = Depends(get_session_issuer),
) -> Account:
    """Resolve the caller from HTTP Basic credentials or a session token."""
    if basic is not None:
        try:
            return account_service.authenticate(basic.username, basic.password)
        except UnauthorizedError as exc:
            raise _unauthorized(exc.message) from exc

    if bearer is not None:
        account_id = session_issuer.decode(bearer.credentials)
        if account_id is None:
            raise _unauthorized("Invalid or expired token")
        try:
            return account_service.get_account_by_id(account_id)
        except NotFoundError as exc:
            raise _unauthorized("User not found") from exc

    raise _unauthorized("Authentication required")
