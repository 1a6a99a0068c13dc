from canteen.data.models import CartItemModel, OrderModel, UserModel
from tests.conftest import PASSWORD


def test_list_users_newest_first(client, admin, customer):
    admin_id, headers = admin
    customer_id, _ = customer

    res = client.get("/api/users", headers=headers)

    assert res.status_code == 200
    ids = [u["id"] for u in res.json()["users"]]
    assert ids == [customer_id, admin_id]
    assert all("password" not in u for u in res.json()["users"])


def test_create_user(client, admin):
    _, headers = admin
    res = client.post(
        "/api/users",
        json={"name": "Staff", "email": "staff@canteen.test", "password": PASSWORD, "role": "admin"},
        headers=headers,
    )

    assert res.status_code == 201
    assert res.json()["user"]["role"] == "admin"

    login = client.post("/api/admin/login", json={"email": "staff@canteen.test", "password": PASSWORD})
    assert login.status_code == 200


def test_create_user_validation(client, admin, customer):
    _, headers = admin

    missing = client.post("/api/users", json={"name": "X"}, headers=headers)
    bad_role = client.post(
        "/api/users",
        json={"name": "X", "email": "x@canteen.test", "password": "p", "role": "root"},
        headers=headers,
    )
    duplicate = client.post(
        "/api/users",
        json={"name": "X", "email": "customer@canteen.test", "password": "p"},
        headers=headers,
    )

    assert missing.status_code == 400
    assert bad_role.status_code == 400
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "User already exists"


def test_get_user_with_orders(client, customer, make_product, make_order):
    user_id, headers = customer
    order_id = make_order(user_id, [(make_product(), 2, "12.00")])

    res = client.get(f"/api/users/{user_id}", headers=headers)

    assert res.status_code == 200
    data = res.json()
    assert data["user"]["id"] == user_id
    assert [o["id"] for o in data["orders"]] == [order_id]
    assert data["orders"][0]["orderItems"][0]["quantity"] == 2


def test_get_other_user(client, customer, admin, make_user):
    _, headers = customer
    _, admin_headers = admin
    other = make_user()

    assert client.get(f"/api/users/{other}", headers=headers).status_code == 403
    assert client.get(f"/api/users/{other}", headers=admin_headers).status_code == 200
    assert client.get("/api/users/999", headers=admin_headers).status_code == 404


def test_update_own_profile(client, customer):
    user_id, headers = customer
    res = client.put(
        f"/api/users/{user_id}",
        json={"city": "Pune", "pincode": "411001", "password": "newpass1"},
        headers=headers,
    )

    assert res.status_code == 200
    assert res.json()["user"]["city"] == "Pune"

    old = client.post("/api/auth/login", json={"identifier": "customer@canteen.test", "password": PASSWORD})
    new = client.post("/api/auth/login", json={"identifier": "customer@canteen.test", "password": "newpass1"})
    assert old.status_code == 400
    assert new.status_code == 200


def test_customer_cannot_change_role(client, customer):
    user_id, headers = customer
    res = client.put(f"/api/users/{user_id}", json={"role": "admin"}, headers=headers)

    assert res.status_code == 403


def test_update_email_conflict(client, customer, make_user):
    user_id, headers = customer
    make_user(email="taken@canteen.test")

    res = client.put(f"/api/users/{user_id}", json={"email": "taken@canteen.test"}, headers=headers)

    assert res.status_code == 400
    assert res.json()["message"] == "Email or phone already registered"


def test_delete_user_cascades(client, admin, customer, make_product, make_order, database, fetch):
    _, headers = admin
    user_id, _ = customer
    product_id = make_product()
    make_order(user_id, [(product_id, 1, "12.00")])
    with database.SessionLocal() as s:
        s.add(CartItemModel(user_id=user_id, product_id=product_id, quantity=1))
        s.commit()

    res = client.delete(f"/api/users/{user_id}", headers=headers)

    assert res.status_code == 200
    assert fetch(UserModel, id=user_id) == []
    assert fetch(OrderModel, user_id=user_id) == []
    assert fetch(CartItemModel, user_id=user_id) == []


def test_delete_missing_user(client, admin):
    _, headers = admin
    assert client.delete("/api/users/999", headers=headers).status_code == 404
