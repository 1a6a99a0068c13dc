# canteen/api/routers/webhooks.py
from fastapi import APIRouter, Depends, Header, Request

from canteen.api.deps import get_payment_service
from canteen.domain.errors import ValidationError
from canteen.services.payment_service import PaymentService

router = APIRouter(prefix="/api/webhook", tags=["webhook"])


@router.post("/razorpay")
async def razorpay_webhook(
    request: Request,
    signature: str | None = Header(None, alias="X-Razorpay-Signature"),
    payments: PaymentService = Depends(get_payment_service),
):
    # podpis liczony z surowego body, nie z przeparsowanego JSON-a
    raw_body = await request.body()
    if not payments.verify_webhook(raw_body, signature):
        raise ValidationError("Invalid signature")
    return {"message": "ok"}
