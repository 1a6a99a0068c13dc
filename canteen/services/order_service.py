# canteen/services/order_service.py
import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from canteen.data.models.order import (
    ORDER_STATUSES,
    PAYMENT_STATUSES,
    OrderModel,
)
from canteen.data.models.order_item import OrderItemModel
from canteen.domain.context import AuthContext
from canteen.domain.errors import (
    EmptyCartError,
    ForbiddenError,
    NotFoundError,
    OutOfStockError,
    UnauthenticatedError,
    ValidationError,
)
from canteen.domain.schemas import OrderCreate
from canteen.repos.cart_repo import CartRepo
from canteen.repos.order_repo import OrderRepo
from canteen.repos.product_repo import ProductRepo
from canteen.services.notification_service import NotificationService
from canteen.utils.logging import get_logger

logger = get_logger(__name__)

COD = "cod"
ALL = "All"

# timeRange z panelu admina -> ile dni wstecz od dzisiejszej polnocy
TIME_RANGES = {"Day": 0, "Week": 7, "Month": 30, "Year": 365}


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Skladanie zamowienia z koszyka to jedna transakcja.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.notification_service = notification_service or NotificationService()

    def place_order(self, ctx: AuthContext | None, payload: OrderCreate) -> OrderModel:
        """
        Use Case: zlozenie zamowienia z koszyka.

        1. Walidacja adresu dostawy i niepustego koszyka
        2. Sprawdzenie stanow magazynowych dla kazdej pozycji
        3. Utworzenie Order + OrderItem (cena z chwili zamowienia)
        4. Zmniejszenie stock i wyczyszczenie koszyka
        Wszystko albo nic: przy bledzie rollback calej transakcji.
        """
        if ctx is None:
            raise UnauthenticatedError()
        user_id = ctx.user_id

        if not (payload.name and payload.address and payload.city and payload.pincode):
            raise ValidationError("Shipping details are incomplete")

        method = (payload.payment_method or COD).strip().lower()
        is_cod = method == COD

        try:
            cart_items = self.carts.get_cart_items(user_id)
            if not cart_items:
                raise EmptyCartError()

            # ponowny odczyt produktow z blokada wierszy
            products = self.products.get_products_for_update(i.product_id for i in cart_items)

            lines = []
            for item in cart_items:
                product = products.get(item.product_id)
                if product is None:
                    raise NotFoundError("Product not found")
                if product.stock < item.quantity:
                    raise OutOfStockError(product.name)
                lines.append((item, product, product.price))

            total = sum((price * item.quantity for item, _, price in lines), Decimal("0.00"))

            order = OrderModel(
                user_id=user_id,
                total_amount=total,
                status="Processing",
                payment_method=method,
                # TODO: wiazac status Paid z podpisem zweryfikowanym dla tego konkretnego zamowienia
                payment_status="Pending" if is_cod else "Paid",
                name=payload.name,
                phone=payload.phone,
                address=payload.address,
                city=payload.city,
                state=payload.state,
                pincode=payload.pincode,
                razorpay_order_id=None if is_cod else payload.razorpay_order_id,
                razorpay_payment_id=None if is_cod else payload.razorpay_payment_id,
                razorpay_signature=None if is_cod else payload.razorpay_signature,
                order_items=[
                    OrderItemModel(product_id=product.id, quantity=item.quantity, price=price)
                    for item, product, price in lines
                ],
            )
            self.repo.add_order(order)

            for item, product, _ in lines:
                self.products.decrement_stock(product, item.quantity)

            self.carts.clear(user_id)
            self.repo.commit()

        except Exception as e:
            self.repo.rollback()
            logger.warning(f"Zamowienie uzytkownika {user_id} wycofane: {e}")
            raise

        logger.info(
            f"Order {order.id} created for user {user_id}: "
            f"{len(lines)} lines, total {total}, payment {method}"
        )

        # Wyslij powiadomienie asynchronicznie
        self.notification_service.send_order_notification(user_id, order.id, total, method)

        return self.repo.get_order(order.id)

    #query
    def get_user_orders(self, ctx: AuthContext) -> list[OrderModel]:
        return self.repo.get_user_orders(ctx.user_id)

    def get_order(self, ctx: AuthContext, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user_id != ctx.user_id and not ctx.is_admin:
            raise ForbiddenError("Access denied")

        return order

    # ------------------------------------------------------------------ admin

    def get_all_orders(
        self,
        page: int = 1,
        limit: int = 50,
        search: str | None = None,
        status: str | None = None,
        payment_status: str | None = None,
        time_range: str | None = None,
    ) -> Dict[str, Any]:
        page = max(page, 1)
        limit = max(limit, 1)

        since = None
        if time_range and time_range in TIME_RANGES:
            midnight = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
            since = midnight - timedelta(days=TIME_RANGES[time_range])

        orders, total = self.repo.search_orders(
            offset=(page - 1) * limit,
            limit=limit,
            search=(search or "").strip() or None,
            status=None if status in (None, "", ALL) else status,
            payment_status=None if payment_status in (None, "", ALL) else payment_status,
            since=since,
        )

        return {
            "orders": orders,
            "total_orders": total,
            "current_page": page,
            "total_pages": math.ceil(total / limit),
        }

    def update_order_status(
        self, order_id: int, status: str | None, payment_status: str | None = None
    ) -> OrderModel:
        if not status and not payment_status:
            raise ValidationError("Invalid status")
        if status and status not in ORDER_STATUSES:
            raise ValidationError("Invalid status")
        if payment_status and payment_status not in PAYMENT_STATUSES:
            raise ValidationError("Invalid payment status")

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        if status:
            order.status = status
        if payment_status:
            order.payment_status = payment_status
        self.repo.commit()

        logger.info(
            f"Order {order_id} status -> {order.status}, payment -> {order.payment_status}"
        )
        return order
