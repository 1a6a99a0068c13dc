from datetime import datetime, timedelta, timezone

import pytest

from canteen.data.models import ProductModel
from tests.conftest import PASSWORD


def test_admin_login(client, admin):
    res = client.post("/api/admin/login", json={"email": "admin@canteen.test", "password": PASSWORD})

    assert res.status_code == 200
    data = res.json()
    assert data["token"]
    assert data["admin"]["role"] == "admin"
    assert "password" not in data["admin"]

    # token admina otwiera trasy admina
    headers = {"Authorization": f"Bearer {data['token']}"}
    assert client.get("/api/admin/orders", headers=headers).status_code == 200


def test_admin_login_rejects_customer(client, customer):
    res = client.post("/api/admin/login", json={"email": "customer@canteen.test", "password": PASSWORD})

    assert res.status_code == 401
    assert res.json()["message"] == "Access Denied: Not an Admin"


def test_admin_login_wrong_password(client, admin):
    res = client.post("/api/admin/login", json={"email": "admin@canteen.test", "password": "nope"})

    assert res.status_code == 400
    assert res.json()["message"] == "Invalid credentials"


def test_admin_email_grants_admin_access(client, make_user, auth_header):
    # rola customer, ale email z ADMIN_EMAIL
    boss = make_user(email="boss@canteen.test")

    res = client.get("/api/admin/orders", headers=auth_header(boss))

    assert res.status_code == 200


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/admin/orders"),
        ("put", "/api/admin/orders/1"),
        ("post", "/api/admin/products"),
        ("delete", "/api/admin/products/1"),
        ("get", "/api/orders/all-orders"),
        ("put", "/api/orders/status/1"),
        ("get", "/api/users"),
    ],
)
def test_admin_routes_reject_customers(client, customer, method, path):
    _, headers = customer
    res = client.request(method, path, json={}, headers=headers)

    assert res.status_code == 403
    assert res.json() == {"success": False, "message": "Forbidden: Admins only"}


def test_all_orders_pagination_and_filters(client, admin, make_user, make_product, make_order):
    _, headers = admin
    ravi = make_user(email="ravi@canteen.test", name="Ravi")
    anu = make_user(email="anu@canteen.test", name="Anu")
    product_id = make_product()
    for _ in range(3):
        make_order(ravi, [(product_id, 1, "12.00")])
    shipped = make_order(anu, [(product_id, 1, "12.00")], status="Shipped", payment_status="Paid")
    make_order(
        anu,
        [(product_id, 1, "12.00")],
        created_at=datetime.now(timezone.utc) - timedelta(days=40),
    )

    page = client.get("/api/admin/orders", params={"page": 2, "limit": 2}, headers=headers).json()
    by_status = client.get("/api/admin/orders", params={"status": "Shipped"}, headers=headers).json()
    by_payment = client.get("/api/admin/orders", params={"paymentStatus": "Paid"}, headers=headers).json()
    by_user = client.get("/api/admin/orders", params={"search": "ravi"}, headers=headers).json()
    by_id = client.get("/api/admin/orders", params={"search": str(shipped)}, headers=headers).json()
    this_month = client.get("/api/admin/orders", params={"timeRange": "Month"}, headers=headers).json()
    everything = client.get(
        "/api/admin/orders", params={"status": "All", "timeRange": "All"}, headers=headers
    ).json()

    assert page["totalOrders"] == 5
    assert page["totalPages"] == 3
    assert page["currentPage"] == 2
    assert len(page["orders"]) == 2
    assert [o["id"] for o in by_status["orders"]] == [shipped]
    assert [o["id"] for o in by_payment["orders"]] == [shipped]
    assert by_user["totalOrders"] == 3
    assert all(o["user"]["name"] == "Ravi" for o in by_user["orders"])
    assert shipped in [o["id"] for o in by_id["orders"]]
    assert this_month["totalOrders"] == 4
    assert everything["totalOrders"] == 5


def test_all_orders_legacy_path(client, admin, customer, make_product, make_order):
    _, headers = admin
    user_id, _ = customer
    make_order(user_id, [(make_product(), 1, "12.00")])

    res = client.get("/api/orders/all-orders", headers=headers)

    assert res.status_code == 200
    assert res.json()["totalOrders"] == 1


def test_update_order_status(client, admin, customer, make_product, make_order):
    _, headers = admin
    user_id, _ = customer
    order_id = make_order(user_id, [(make_product(), 1, "12.00")])

    res = client.put(f"/api/admin/orders/{order_id}", json={"status": "Shipped"}, headers=headers)
    legacy = client.put(
        f"/api/orders/status/{order_id}",
        json={"status": "Delivered", "paymentStatus": "Paid"},
        headers=headers,
    )

    assert res.status_code == 200
    assert res.json()["order"]["status"] == "Shipped"
    assert legacy.status_code == 200
    assert legacy.json()["status"] == "Delivered"
    assert legacy.json()["paymentStatus"] == "Paid"


def test_update_order_status_validation(client, admin, customer, make_product, make_order):
    _, headers = admin
    user_id, _ = customer
    order_id = make_order(user_id, [(make_product(), 1, "12.00")])

    bad_status = client.put(f"/api/admin/orders/{order_id}", json={"status": "Lost"}, headers=headers)
    bad_payment = client.put(
        f"/api/admin/orders/{order_id}", json={"paymentStatus": "Refunded"}, headers=headers
    )
    missing = client.put("/api/admin/orders/999", json={"status": "Shipped"}, headers=headers)

    assert bad_status.status_code == 400
    assert bad_status.json()["message"] == "Invalid status"
    assert bad_payment.status_code == 400
    assert bad_payment.json()["message"] == "Invalid payment status"
    assert missing.status_code == 404


def test_admin_add_and_delete_product(client, admin, fetch):
    _, headers = admin
    res = client.post(
        "/api/admin/products",
        json={"name": "Tea (500g)", "category": "Grocery", "price": 7, "stock": 40, "imageUrl": "☕"},
        headers=headers,
    )

    assert res.status_code == 201
    product = res.json()["product"]
    assert product["image"] == "☕"
    assert product["slug"] == f"tea-500g-{product['id']}"

    deleted = client.delete(f"/api/admin/products/{product['id']}", headers=headers)

    assert deleted.status_code == 200
    assert fetch(ProductModel, id=product["id"]) == []


def test_admin_add_product_missing_fields(client, admin):
    _, headers = admin
    res = client.post("/api/admin/products", json={"name": "Tea"}, headers=headers)

    assert res.status_code == 400
    assert res.json()["message"] == "Missing required fields"


def test_order_search_with_unicode_digit(client, admin, customer, make_product, make_order):
    _, headers = admin
    user_id, _ = customer
    make_order(user_id, [(make_product(), 1, "12.00")])

    res = client.get("/api/admin/orders", params={"search": "²"}, headers=headers)

    assert res.status_code == 200
    assert res.json()["totalOrders"] == 0
