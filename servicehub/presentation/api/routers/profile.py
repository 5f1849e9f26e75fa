from fastapi import APIRouter, Depends

from ....application.services.account_service import AccountService
from ....core.dependencies import get_account_service
from ....domain.models import Account
from ...api.dependencies import require_account
from ...api.schemas.account import AccountResponse, ProfileUpdateRequest

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("", response_model=AccountResponse)
def get_profile(
    current: Account = Depends(require_account),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = account_service.get_account(current.email)
    return AccountResponse.model_validate(account)


@router.put("", response_model=AccountResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    current: Account = Depends(require_account),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """Update profile fields; email, password and role cannot be changed here."""
    account = account_service.update_profile(
        current.email,
        name=payload.name,
        provider_type=payload.provider_type,
        preferred_language=payload.preferred_language,
        gender=payload.gender,
        country=payload.country,
        phone_number=payload.phone_number,
    )
    return AccountResponse.model_validate(account)
