import os

# musi byc ustawione przed importem canteen (celery czyta env przy imporcie)
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"

from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from canteen.api import create_app
from canteen.api.deps import get_image_storage, get_payment_service
from canteen.data.database import Database
from canteen.data.models import OrderItemModel, OrderModel, ProductModel, UserModel
from canteen.services.payment_service import PaymentService
from canteen.utils.security import PasswordHasher, TokenCodec
from canteen.utils.settings import Settings

PASSWORD = "secret123"


class FakeRazorpayClient:
    def __init__(self):
        self.calls = []

    def create_order(self, amount, currency, receipt):
        self.calls.append({"amount": amount, "currency": currency, "receipt": receipt})
        return {"id": f"order_fake_{len(self.calls)}", "amount": amount, "currency": currency}


class FakeImageStorage:
    def __init__(self):
        self.uploads = []

    def upload(self, filename, content):
        self.uploads.append((filename, content))
        return f"https://img.test/{filename}"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        jwt_secret="test-secret",
        bcrypt_salt_rounds=4,
        admin_email="boss@canteen.test",
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret="rzp_test_secret",
        razorpay_webhook_secret="whsec_test",
    )


@pytest.fixture
def database(settings):
    db = Database(settings.database_url)
    yield db
    db.dispose()


@pytest.fixture
def razorpay():
    return FakeRazorpayClient()


@pytest.fixture
def images():
    return FakeImageStorage()


@pytest.fixture
def app(settings, database, razorpay, images):
    app = create_app(settings, database)
    app.dependency_overrides[get_payment_service] = lambda: PaymentService(razorpay, settings)
    app.dependency_overrides[get_image_storage] = lambda: images
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session(app, database):
    s = database.SessionLocal()
    yield s
    s.close()


@pytest.fixture
def hasher():
    return PasswordHasher(4)


@pytest.fixture
def make_user(database, hasher):
    counter = {"n": 0}

    def _make(email=None, role="customer", password=PASSWORD, phone=None, name="Test User", created_at=None):
        counter["n"] += 1
        with database.SessionLocal() as s:
            user = UserModel(
                name=name,
                email=email or f"user{counter['n']}@canteen.test",
                phone=phone,
                password=hasher.hash(password),
                role=role,
            )
            if created_at is not None:
                user.created_at = created_at
            s.add(user)
            s.commit()
            return user.id

    return _make


@pytest.fixture
def make_product(database):
    def _make(name="Rice (5kg)", price="12.00", stock=10, category="Grocery", **kwargs):
        with database.SessionLocal() as s:
            product = ProductModel(
                name=name,
                price=Decimal(price),
                stock=stock,
                category=category,
                **kwargs,
            )
            s.add(product)
            s.commit()
            return product.id

    return _make


@pytest.fixture
def make_order(database):
    def _make(user_id, lines=(), created_at=None, status="Processing", payment_status="Pending", payment_method="cod"):
        with database.SessionLocal() as s:
            order = OrderModel(
                user_id=user_id,
                total_amount=sum((Decimal(price) * qty for _, qty, price in lines), Decimal("0.00")),
                status=status,
                payment_method=payment_method,
                payment_status=payment_status,
                name="Ravi Kumar",
                address="12 Cantonment Road",
                city="Pune",
                pincode="411001",
                order_items=[
                    OrderItemModel(product_id=product_id, quantity=qty, price=Decimal(price))
                    for product_id, qty, price in lines
                ],
            )
            if created_at is not None:
                order.created_at = created_at
            s.add(order)
            s.commit()
            return order.id

    return _make


@pytest.fixture
def auth_header(settings):
    codec = TokenCodec(settings.jwt_secret)

    def _header(user_id, expires_in=timedelta(days=1)):
        token = codec.encode({"id": user_id}, expires_in)
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
def customer(make_user, auth_header):
    user_id = make_user(email="customer@canteen.test")
    return user_id, auth_header(user_id)


@pytest.fixture
def admin(make_user, auth_header):
    user_id = make_user(email="admin@canteen.test", role="admin", name="Admin")
    return user_id, auth_header(user_id)


@pytest.fixture
def fetch(database):
    """Swiezy odczyt z bazy po operacjach wykonanych przez API."""

    def _fetch(model, **filters):
        with database.SessionLocal() as s:
            return s.query(model).filter_by(**filters).all()

    return _fetch
