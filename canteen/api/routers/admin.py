# canteen/api/routers/admin.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from canteen.api.deps import get_db, get_settings, require_admin
from canteen.domain.context import AuthContext
from canteen.domain.schemas import (
    AdminAuthOut,
    AdminLoginIn,
    AnalyticsOut,
    MessageOut,
    OrderEnvelope,
    OrderPageOut,
    OrderStatusIn,
    ProductEnvelope,
    ProductIn,
)
from canteen.services.analytics_service import AnalyticsService
from canteen.services.auth_service import AuthService
from canteen.services.order_service import OrderService
from canteen.services.product_service import ProductService
from canteen.utils.settings import Settings

router = APIRouter(prefix="/api/admin", tags=["admin"])


# --- Public Routes ---
@router.post("/login", response_model=AdminAuthOut)
def admin_login(
    payload: AdminLoginIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return AuthService(db, settings).admin_login(payload.email, payload.password)


# --- Dashboard Stats & Analytics ---
@router.get("/stats", response_model=AnalyticsOut)
@router.get("/analytics", response_model=AnalyticsOut)
def get_analytics(
    range_: str = Query("7d", alias="range"),
    interval: str = Query("day"),
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).get_analytics(range_=range_, interval=interval)


# --- Order Management ---
@router.get("/orders", response_model=OrderPageOut)
def get_all_orders(
    page: int = Query(1),
    limit: int = Query(50),
    search: str | None = Query(None),
    status: str | None = Query(None),
    payment_status: str | None = Query(None, alias="paymentStatus"),
    time_range: str | None = Query(None, alias="timeRange"),
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return OrderService(db).get_all_orders(
        page=page,
        limit=limit,
        search=search,
        status=status,
        payment_status=payment_status,
        time_range=time_range,
    )


@router.put("/orders/{order_id}", response_model=OrderEnvelope)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    order = OrderService(db).update_order_status(order_id, payload.status, payload.payment_status)
    return {"order": order}


# --- Product Management ---
@router.post("/products", response_model=ProductEnvelope, status_code=201)
def add_product(
    payload: ProductIn,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return {"product": ProductService(db).create_product(payload)}


@router.delete("/products/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ProductService(db).delete_product(product_id)
    return {"message": "Product deleted successfully"}
