from typing import List

from fastapi import APIRouter, Depends

from ....application.services.account_service import AccountService
from ....core.dependencies import get_account_service
from ....domain.models import Account
from ...api.dependencies import require_account
from ...api.schemas.account import AccountResponse

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/users", response_model=List[AccountResponse])
def list_users(
    _: Account = Depends(require_account),
    account_service: AccountService = Depends(get_account_service),
) -> List[AccountResponse]:
    return [AccountResponse.model_validate(account) for account in account_service.list_accounts()]
