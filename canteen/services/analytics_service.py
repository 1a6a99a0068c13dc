# canteen/services/analytics_service.py
import calendar
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from canteen.repos.order_repo import OrderRepo
from canteen.repos.product_repo import ProductRepo
from canteen.repos.user_repo import UserRepo
from canteen.utils.logging import get_logger

logger = get_logger(__name__)

RANGE_DAYS = {"7d": 7, "30d": 30, "90d": 90}
INTERVALS = ("day", "week", "month", "year")
TOP_PRODUCTS_LIMIT = 5


def whole(value: Decimal) -> int:
    # polowki w gore (4.50 -> 5), round() na Decimal zaokragla do parzystej
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def as_utc(dt: datetime) -> datetime:
    # SQLite zwraca naive datetime, zapisujemy zawsze w UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def bucket_label(dt: datetime, interval: str) -> str:
    if interval == "year":
        return str(dt.year)
    if interval == "month":
        return f"{dt:%b} {dt.year}"
    if interval == "week":
        monday = dt - timedelta(days=dt.weekday())
        return f"Wk {monday.day} {monday:%b}"
    return f"{dt:%b} {dt.day}"


def _add_months(dt: datetime, months: int) -> datetime:
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def next_bucket(dt: datetime, interval: str) -> datetime:
    if interval == "year":
        return _add_months(dt, 12)
    if interval == "month":
        return _add_months(dt, 1)
    if interval == "week":
        return dt + timedelta(days=7)
    return dt + timedelta(days=1)


def empty_series(start: datetime, end: datetime, interval: str) -> "OrderedDict[str, Decimal]":
    """Kazdy kubelek od start do end zainicjalizowany zerem, bez dziur."""
    series: "OrderedDict[str, Decimal]" = OrderedDict()
    cursor = start
    while cursor <= end:
        series.setdefault(bucket_label(cursor, interval), Decimal("0"))
        cursor = next_bucket(cursor, interval)
    series.setdefault(bucket_label(end, interval), Decimal("0"))
    return series


class AnalyticsService:
    """Agregacje dla dashboardu admina, tylko odczyt."""

    def __init__(self, db: Session):
        self.orders = OrderRepo(db)
        self.users = UserRepo(db)
        self.products = ProductRepo(db)

    def resolve_start(self, range_: str | None, now: datetime) -> datetime:
        if range_ == "all":
            first = self.orders.earliest_order_date()
            # bez zamowien wykres ma jeden kubelek zamiast serii od 1970
            return as_utc(first) if first else now
        return now - timedelta(days=RANGE_DAYS.get(range_ or "7d", 7))

    def get_analytics(
        self,
        range_: str | None = "7d",
        interval: str | None = "day",
        now: datetime | None = None,
    ) -> Dict[str, Any]:
        now = as_utc(now) if now else datetime.now(timezone.utc)
        interval = interval if interval in INTERVALS else "day"
        start = self.resolve_start(range_, now)

        total_orders = self.orders.count_since(start)
        new_customers = self.users.count_customers_since(start)
        revenue = Decimal(self.orders.revenue_since(start) or 0)

        logger.info(
            f"Analytics range={range_} interval={interval} start={start.isoformat()} "
            f"orders={total_orders}"
        )

        return {
            "total_revenue": whole(revenue),
            "total_orders": total_orders,
            "total_users": new_customers,
            "chart_data": self._chart(start, now, interval),
            "pie_chart_data": self._categories(start),
            "top_products": self._top_products(start),
        }

    def _chart(self, start: datetime, now: datetime, interval: str) -> List[Dict[str, Any]]:
        series = empty_series(start, now, interval)

        for created_at, amount in self.orders.totals_since(start):
            label = bucket_label(as_utc(created_at), interval)
            series[label] = series.get(label, Decimal("0")) + Decimal(amount or 0)

        return [{"name": name, "sales": whole(value)} for name, value in series.items()]

    def _top_products(self, start: datetime) -> List[Dict[str, Any]]:
        grouped = self.orders.top_products_since(start, TOP_PRODUCTS_LIMIT)
        details = {
            p.id: p
            for p in self.products.get_products(pid for pid, _ in grouped if pid is not None)
        }

        result = []
        for product_id, quantity in grouped:
            product = details.get(product_id)
            price = product.price if product else Decimal("0")
            result.append(
                {
                    "name": product.name if product else "Unknown Product",
                    "sales": float(price * quantity),
                    "quantity": int(quantity),
                    "image": product.image if product else None,
                }
            )
        return result

    def _categories(self, start: datetime) -> List[Dict[str, Any]]:
        totals: "OrderedDict[str, Decimal]" = OrderedDict()
        for category, price, quantity in self.orders.category_lines_since(start):
            name = category or "Uncategorized"
            totals[name] = totals.get(name, Decimal("0")) + Decimal(price or 0) * (quantity or 0)

        return [{"name": name, "value": whole(value)} for name, value in totals.items()]
