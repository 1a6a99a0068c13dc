import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from canteen.domain.errors import PaymentGatewayError
from canteen.services.payment_client import RazorpayClient
from canteen.services.payment_service import hmac_sha256_hex


def test_create_razorpay_order_in_paise(client, customer, razorpay):
    _, headers = customer
    res = client.post("/api/orders/create-razorpay-order", json={"amount": 250.5}, headers=headers)

    assert res.status_code == 200
    data = res.json()
    assert data["orderId"] == "order_fake_1"
    assert data["amount"] == 25050
    assert data["currency"] == "INR"
    assert razorpay.calls[0]["amount"] == 25050
    assert razorpay.calls[0]["receipt"].startswith("receipt_")


@pytest.mark.parametrize("body", [{}, {"amount": 0}, {"amount": -5}])
def test_create_razorpay_order_requires_amount(client, customer, body):
    _, headers = customer
    res = client.post("/api/orders/create-razorpay-order", json=body, headers=headers)

    assert res.status_code == 400
    assert res.json()["message"] == "Amount required"


def test_create_razorpay_order_requires_login(client):
    res = client.post("/api/orders/create-razorpay-order", json={"amount": 10})

    assert res.status_code == 401


def test_verify_payment(client, customer, settings):
    _, headers = customer
    signature = hmac_sha256_hex(settings.razorpay_key_secret, b"order_1|pay_1")

    ok = client.post(
        "/api/orders/verify-payment",
        json={"razorpayOrderId": "order_1", "razorpayPaymentId": "pay_1", "razorpaySignature": signature},
        headers=headers,
    )
    tampered = client.post(
        "/api/orders/verify-payment",
        json={"razorpayOrderId": "order_1", "razorpayPaymentId": "pay_2", "razorpaySignature": signature},
        headers=headers,
    )

    assert ok.status_code == 200
    assert ok.json()["success"] is True
    assert tampered.status_code == 400
    assert tampered.json() == {"success": False, "message": "Invalid signature"}


def test_verify_payment_accepts_snake_case_fields(client, customer, settings):
    _, headers = customer
    signature = hmac_sha256_hex(settings.razorpay_key_secret, b"order_1|pay_1")

    res = client.post(
        "/api/orders/verify-payment",
        json={"razorpay_order_id": "order_1", "razorpay_payment_id": "pay_1", "razorpay_signature": signature},
        headers=headers,
    )

    assert res.status_code == 200


def test_webhook_signature(client, settings):
    body = json.dumps({"event": "payment.captured"}).encode()
    signature = hmac_sha256_hex(settings.razorpay_webhook_secret, body)

    ok = client.post("/api/webhook/razorpay", content=body, headers={"X-Razorpay-Signature": signature})
    bad = client.post("/api/webhook/razorpay", content=body, headers={"X-Razorpay-Signature": "nope"})
    missing = client.post("/api/webhook/razorpay", content=body)

    assert ok.status_code == 200
    assert ok.json() == {"message": "ok"}
    assert bad.status_code == 400
    assert missing.status_code == 400


def test_webhook_signature_uses_raw_body(client, settings):
    # ten sam JSON, inne formatowanie -> inny podpis
    signed = json.dumps({"event": "payment.captured"}).encode()
    sent = json.dumps({"event": "payment.captured"}, separators=(",", ":")).encode()
    signature = hmac_sha256_hex(settings.razorpay_webhook_secret, signed)

    res = client.post("/api/webhook/razorpay", content=sent, headers={"X-Razorpay-Signature": signature})

    assert res.status_code == 400


def test_razorpay_client_posts_order(settings):
    response = MagicMock()
    response.json.return_value = {"id": "order_1", "amount": 100, "currency": "INR"}

    with patch("canteen.services.payment_client.requests.post", return_value=response) as post:
        order = RazorpayClient(settings).create_order(amount=100, currency="INR", receipt="r1")

    assert order["id"] == "order_1"
    args, kwargs = post.call_args
    assert args[0] == "https://api.razorpay.com/v1/orders"
    assert kwargs["json"] == {"amount": 100, "currency": "INR", "receipt": "r1"}
    assert kwargs["auth"] == ("rzp_test_key", "rzp_test_secret")


def test_razorpay_client_wraps_gateway_errors(settings):
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError("401 Unauthorized")

    with patch("canteen.services.payment_client.requests.post", return_value=response) as post:
        with pytest.raises(PaymentGatewayError):
            RazorpayClient(settings).create_order(amount=100, currency="INR", receipt="r1")

    # 4xx nie jest ponawiane
    assert post.call_count == 1


def test_razorpay_client_retries_connection_errors(settings):
    with patch(
        "canteen.services.payment_client.requests.post",
        side_effect=requests.ConnectionError("down"),
    ) as post, patch("time.sleep"):
        with pytest.raises(PaymentGatewayError):
            RazorpayClient(settings).create_order(amount=100, currency="INR", receipt="r1")

    assert post.call_count == 3


def test_verify_payment_with_non_ascii_signature(client, customer):
    _, headers = customer
    res = client.post(
        "/api/orders/verify-payment",
        json={"razorpayOrderId": "order_1", "razorpayPaymentId": "pay_1", "razorpaySignature": "é"},
        headers=headers,
    )

    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Invalid signature"}


def test_webhook_with_non_ascii_signature(client):
    body = json.dumps({"event": "payment.captured"}).encode()

    res = client.post("/api/webhook/razorpay", content=body, headers={"X-Razorpay-Signature": b"caf\xe9"})

    assert res.status_code == 400
    assert res.json()["message"] == "Invalid signature"
