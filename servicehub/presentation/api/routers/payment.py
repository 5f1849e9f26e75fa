"""Payment intent pass-through to the payment processor."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from ....core.dependencies import get_payment_processor
from ....domain.models import Account
from ....domain.ports.gateways import PaymentProcessor
from ...api.dependencies import require_account

router = APIRouter(prefix="/api/payment", tags=["Payments"])


@router.post("/create-intent", response_class=PlainTextResponse)
def create_payment_intent(
    amount: int = Query(..., description="Amount in the currency's smallest unit (e.g. cents)"),
    currency: str = Query(..., description="Currency code, e.g. usd"),
    _: Account = Depends(require_account),
    payment_processor: PaymentProcessor = Depends(get_payment_processor),
) -> str:
    """Create a payment intent and return the processor's client secret."""
    return payment_processor.create_payment_intent(amount, currency)
