# canteen/api/routers/orders.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from canteen.api.deps import get_current_user, get_db, get_payment_service, require_admin
from canteen.domain.context import AuthContext
from canteen.domain.errors import ValidationError
from canteen.domain.schemas import (
    MessageOut,
    OrderCreate,
    OrderEnvelope,
    OrderListOut,
    OrderOut,
    OrderPageOut,
    OrderStatusIn,
    PaymentOrderIn,
    PaymentOrderOut,
    VerifyPaymentIn,
)
from canteen.services.order_service import OrderService
from canteen.services.payment_service import PaymentService

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


# ---------------------------------------------------------------- platnosci

@router.post("/create-razorpay-order", response_model=PaymentOrderOut)
def create_razorpay_order(
    payload: PaymentOrderIn,
    ctx: AuthContext = Depends(get_current_user),
    payments: PaymentService = Depends(get_payment_service),
):
    return payments.create_payment_order(payload.amount)


@router.post("/verify-payment", response_model=MessageOut)
def verify_payment(
    payload: VerifyPaymentIn,
    ctx: AuthContext = Depends(get_current_user),
    payments: PaymentService = Depends(get_payment_service),
):
    ok = payments.verify_payment(
        payload.razorpay_order_id,
        payload.razorpay_payment_id,
        payload.razorpay_signature,
    )
    if not ok:
        raise ValidationError("Invalid signature")
    return {"message": "Payment verified"}


# ---------------------------------------------------------------- klient

@router.post("", response_model=OrderEnvelope, status_code=201)
def create_order(
    payload: OrderCreate,
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Sklada zamowienie z koszyka zalogowanego uzytkownika.
    Wysyla powiadomienie asynchronicznie.
    """
    return {"order": get_service(db).place_order(ctx, payload)}


@router.get("", response_model=OrderListOut)
def get_user_orders(ctx: AuthContext = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"orders": get_service(db).get_user_orders(ctx)}


# ---------------------------------------------------------------- admin
# te same operacje co /api/admin/orders, panel admina uzywa obu sciezek

@router.get("/all-orders", response_model=OrderPageOut)
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
    return get_service(db).get_all_orders(
        page=page,
        limit=limit,
        search=search,
        status=status,
        payment_status=payment_status,
        time_range=time_range,
    )


@router.put("/status/{order_id}", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).update_order_status(order_id, payload.status, payload.payment_status)


# musi byc ostatnie, zeby nie przechwycic /all-orders
@router.get("/{order_id}", response_model=OrderEnvelope)
def get_order(
    order_id: int,
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"order": get_service(db).get_order(ctx, order_id)}
