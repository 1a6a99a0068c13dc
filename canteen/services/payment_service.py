# canteen/services/payment_service.py
import hashlib
import hmac
import json
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict

from canteen.domain.errors import ValidationError
from canteen.services.payment_client import RazorpayClient
from canteen.utils.logging import get_logger
from canteen.utils.settings import Settings

logger = get_logger(__name__)

CURRENCY = "INR"


def hmac_sha256_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def signatures_match(expected: str, signature: str) -> bool:
    # porownanie bajtow, str z nie-ASCII rzuca TypeError w compare_digest
    return hmac.compare_digest(expected.encode(), signature.encode("utf-8", "surrogateescape"))


class PaymentService:
    """
    Integracja z Razorpay: zamowienie po stronie bramki, weryfikacja podpisu
    z widgetu i webhooka. Nie zmienia stanu zamowien.
    """

    def __init__(self, client: RazorpayClient, settings: Settings):
        self.client = client
        self.key_secret = settings.razorpay_key_secret
        self.webhook_secret = settings.razorpay_webhook_secret

    def create_payment_order(self, amount: Decimal | None) -> Dict[str, Any]:
        if amount is None or amount <= 0:
            raise ValidationError("Amount required")

        minor = int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        receipt = f"receipt_{int(time.time() * 1000)}"

        order = self.client.create_order(amount=minor, currency=CURRENCY, receipt=receipt)
        logger.info(f"Gateway order {order['id']} created for {minor} {CURRENCY}")

        return {
            "order_id": order["id"],
            "amount": order["amount"],
            "currency": order["currency"],
        }

    def verify_payment(self, order_id: str | None, payment_id: str | None, signature: str | None) -> bool:
        if not order_id or not payment_id or not signature:
            return False

        expected = hmac_sha256_hex(self.key_secret, f"{order_id}|{payment_id}".encode())
        ok = signatures_match(expected, signature)
        logger.info(f"Payment {payment_id} for gateway order {order_id} verified={ok}")
        return ok

    def verify_webhook(self, raw_body: bytes, signature: str | None) -> bool:
        if not signature or not self.webhook_secret:
            return False

        expected = hmac_sha256_hex(self.webhook_secret, raw_body)
        if not signatures_match(expected, signature):
            logger.warning("Webhook with invalid signature rejected")
            return False

        try:
            body = json.loads(raw_body or b"{}")
        except ValueError:
            body = {}
        event = body.get("event") if isinstance(body, dict) else None
        # TODO: aktualizacja statusu zamowienia po payment.captured / payment.failed
        logger.info(f"Webhook verified: {event}")
        return True
