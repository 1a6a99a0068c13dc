# canteen/repos/order_repo.py
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload, selectinload

from canteen.data.models.order import OrderModel
from canteen.data.models.order_item import OrderItemModel
from canteen.data.models.product import ProductModel
from canteen.data.models.user import UserModel


def _with_details():
    return (
        selectinload(OrderModel.order_items).joinedload(OrderItemModel.product),
        joinedload(OrderModel.user),
    )


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).options(*_with_details()).where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def get_user_orders(self, user_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(*_with_details())
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars()
        )

    def search_orders(
        self,
        offset: int,
        limit: int,
        search: str | None = None,
        status: str | None = None,
        payment_status: str | None = None,
        since: datetime | None = None,
    ) -> tuple[list[OrderModel], int]:
        conditions = []

        if status:
            conditions.append(OrderModel.status == status)
        if payment_status:
            conditions.append(OrderModel.payment_status == payment_status)
        if since is not None:
            conditions.append(OrderModel.created_at >= since)
        if search:
            pattern = f"%{search}%"
            matches = [UserModel.name.ilike(pattern), UserModel.email.ilike(pattern)]
            term = search.strip()
            if term.isascii() and term.isdigit():
                matches.append(OrderModel.id == int(term))
            conditions.append(or_(*matches))

        base = select(OrderModel).join(UserModel, OrderModel.user_id == UserModel.id)

        total = self.db.execute(
            select(func.count()).select_from(base.where(*conditions).subquery())
        ).scalar_one()

        orders = list(
            self.db.execute(
                base.options(*_with_details())
                .where(*conditions)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
                .offset(offset)
                .limit(limit)
            ).scalars().unique()
        )
        return orders, total

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    # ---------------------------------------------------- agregacje (analytics)

    def earliest_order_date(self) -> datetime | None:
        return self.db.execute(select(func.min(OrderModel.created_at))).scalar_one()

    def count_since(self, start: datetime) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(OrderModel.created_at >= start)
        ).scalar_one()

    def revenue_since(self, start: datetime):
        return self.db.execute(
            select(func.coalesce(func.sum(OrderModel.total_amount), 0)).where(
                OrderModel.created_at >= start
            )
        ).scalar_one()

    def totals_since(self, start: datetime) -> list[tuple[datetime, object]]:
        rows = self.db.execute(
            select(OrderModel.created_at, OrderModel.total_amount)
            .where(OrderModel.created_at >= start)
            .order_by(OrderModel.created_at.asc())
        ).all()
        return [(r[0], r[1]) for r in rows]

    def top_products_since(self, start: datetime, limit: int = 5):
        """(product_id, suma ilosci) malejaco."""
        qty = func.sum(OrderItemModel.quantity).label("qty")
        return self.db.execute(
            select(OrderItemModel.product_id, qty)
            .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
            .where(OrderModel.created_at >= start)
            .group_by(OrderItemModel.product_id)
            .order_by(qty.desc(), OrderItemModel.product_id)
            .limit(limit)
        ).all()

    def category_lines_since(self, start: datetime):
        """(kategoria albo None, cena, ilosc) dla kazdej pozycji zamowienia."""
        return self.db.execute(
            select(ProductModel.category, OrderItemModel.price, OrderItemModel.quantity)
            .select_from(OrderItemModel)
            .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
            .outerjoin(ProductModel, OrderItemModel.product_id == ProductModel.id)
            .where(OrderModel.created_at >= start)
        ).all()
