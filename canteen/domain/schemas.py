# canteen/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON w camelCase (frontend), w Pythonie snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------- users / auth

class UserOut(CamelModel):
    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    role: str
    created_at: datetime


class RegisterIn(CamelModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None


class LoginIn(CamelModel):
    """identifier to email albo numer telefonu."""

    identifier: str | None = None
    password: str | None = None


class AdminLoginIn(CamelModel):
    email: str | None = None
    password: str | None = None


class AuthOut(CamelModel):
    success: bool = True
    user: UserOut
    token: str


class MeOut(CamelModel):
    success: bool = True
    user: UserOut


class AdminOut(CamelModel):
    id: int
    name: str
    email: str | None = None
    role: str


class AdminAuthOut(CamelModel):
    success: bool = True
    token: str
    admin: AdminOut


class UserCreateIn(CamelModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    phone: str | None = None
    role: str = "customer"


class UserUpdateIn(CamelModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    password: str | None = None
    role: str | None = None


class UserListOut(CamelModel):
    success: bool = True
    users: List[UserOut]


class UserEnvelope(CamelModel):
    success: bool = True
    user: UserOut


# ---------------------------------------------------------------- products

class ProductOut(CamelModel):
    id: int
    name: str
    slug: str | None = None
    sku: str | None = None
    brand: str | None = None
    description: str | None = None
    category: str
    price: float
    discount_price: float | None = None
    stock: int
    image: str | None = None
    is_active: bool
    is_featured: bool
    created_at: datetime


class ProductPageOut(CamelModel):
    items: List[ProductOut]
    page: int
    total_pages: int
    total: int
    has_more: bool


class ProductIn(CamelModel):
    """Pola produktu z panelu admina (JSON albo multipart)."""

    name: str | None = None
    category: str | None = None
    price: Decimal | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    description: str | None = None
    brand: str | None = None
    sku: str | None = None
    slug: str | None = None
    discount_price: Decimal | None = Field(None, ge=0)
    image_url: str | None = None
    is_active: bool | None = None
    is_featured: bool | None = None


class ProductEnvelope(CamelModel):
    success: bool = True
    product: ProductOut


# ---------------------------------------------------------------- cart

class ItemIn(CamelModel):
    """Dodanie produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(1, gt=0, description="Ilosc produktu (musi byc > 0)")


class QuantityIn(CamelModel):
    quantity: int | None = None


class CartItemOut(CamelModel):
    id: int
    user_id: int
    product_id: int
    quantity: int


class CartLineOut(CamelModel):
    id: int
    product: ProductOut
    quantity: int


class CartOut(CamelModel):
    items: List[CartLineOut]
    total: float


# ---------------------------------------------------------------- orders

class OrderCreate(CamelModel):
    name: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    payment_method: str | None = None
    razorpay_order_id: str | None = None
    razorpay_payment_id: str | None = None
    razorpay_signature: str | None = None


class OrderItemOut(CamelModel):
    id: int
    order_id: int
    product_id: int | None = None
    quantity: int
    price: float
    product: ProductOut | None = None


class OrderUserOut(CamelModel):
    id: int
    name: str
    email: str | None = None
    phone: str | None = None


class OrderOut(CamelModel):
    id: int
    user_id: int
    total_amount: float
    status: str
    payment_method: str
    payment_status: str
    name: str
    phone: str | None = None
    address: str
    city: str
    state: str | None = None
    pincode: str
    razorpay_order_id: str | None = None
    razorpay_payment_id: str | None = None
    created_at: datetime
    order_items: List[OrderItemOut] = []
    user: OrderUserOut | None = None


class OrderEnvelope(CamelModel):
    success: bool = True
    order: OrderOut


class OrderListOut(CamelModel):
    success: bool = True
    orders: List[OrderOut]


class OrderPageOut(CamelModel):
    success: bool = True
    orders: List[OrderOut]
    total_orders: int
    current_page: int
    total_pages: int


class OrderStatusIn(CamelModel):
    status: str | None = None
    payment_status: str | None = None


class UserDetailOut(CamelModel):
    success: bool = True
    user: UserOut
    orders: List[OrderOut]


# ---------------------------------------------------------------- payments

class PaymentOrderIn(CamelModel):
    amount: Decimal | None = None


class PaymentOrderOut(CamelModel):
    success: bool = True
    order_id: str
    amount: int
    currency: str


class VerifyPaymentIn(CamelModel):
    razorpay_order_id: str | None = None
    razorpay_payment_id: str | None = None
    razorpay_signature: str | None = None


# ---------------------------------------------------------------- analytics

class ChartPoint(CamelModel):
    name: str
    sales: int


class PiePoint(CamelModel):
    name: str
    value: int


class TopProduct(CamelModel):
    name: str
    sales: float
    quantity: int
    image: str | None = None


class AnalyticsOut(CamelModel):
    success: bool = True
    total_revenue: int
    total_orders: int
    total_users: int
    chart_data: List[ChartPoint]
    pie_chart_data: List[PiePoint]
    top_products: List[TopProduct]


class MessageOut(CamelModel):
    success: bool = True
    message: str | None = None
