# canteen/services/payment_client.py
import requests
from requests import RequestException

from canteen.domain.errors import PaymentGatewayError
from canteen.utils.logging import get_logger
from canteen.utils.retry import http_retry
from canteen.utils.settings import Settings

logger = get_logger(__name__)


class RazorpayClient:
    def __init__(self, settings: Settings):
        self.base_url = settings.razorpay_api_url.rstrip("/")
        self.key_id = settings.razorpay_key_id
        self.key_secret = settings.razorpay_key_secret
        self.timeout = settings.http_timeout_seconds

    def create_order(self, amount: int, currency: str, receipt: str) -> dict:
        """amount w groszach/paisach (minor units)."""
        try:
            return self._post_order({"amount": amount, "currency": currency, "receipt": receipt})
        except RequestException as e:
            logger.error(f"Razorpay order creation failed: {e}")
            raise PaymentGatewayError("Payment gateway unavailable") from e

    @http_retry()
    def _post_order(self, body: dict) -> dict:
        url = f"{self.base_url}/orders"
        logger.info(f"RazorpayClient POST {url} amount={body['amount']}")

        resp = requests.post(
            url,
            json=body,
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()
