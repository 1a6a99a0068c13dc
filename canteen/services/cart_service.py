from decimal import Decimal
from typing import Any, Dict, Tuple

from sqlalchemy.orm import Session

from canteen.data.models.cart_item import CartItemModel
from canteen.domain.context import AuthContext
from canteen.domain.errors import NotFoundError, UnauthenticatedError, ValidationError
from canteen.repos.cart_repo import CartRepo
from canteen.repos.product_repo import ProductRepo
from canteen.utils.logging import get_logger

logger = get_logger(__name__)


def _require_user(ctx: AuthContext | None) -> int:
    if ctx is None or ctx.user is None:
        raise UnauthenticatedError("Unauthorized: You must be logged in.")
    return ctx.user_id


class CartService:
    """
    Prosta implementacja cqrs dla koszyka
    commands (add, update, remove, clear) modyfikuja stan
    query (get) tylko odczyt
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query - odczyt
    def get_cart(self, ctx: AuthContext | None) -> Dict[str, Any]:
        user_id = _require_user(ctx)

        # pozycje bez produktu pomijamy
        items = [i for i in self.repo.get_cart_items(user_id) if i.product is not None]
        total = sum((i.product.price * i.quantity for i in items), Decimal("0.00"))

        return {
            "items": [
                {"id": i.id, "product": i.product, "quantity": i.quantity}
                for i in items
            ],
            "total": total,
        }

    #commands
    def add_to_cart(
        self, ctx: AuthContext | None, product_id: int, quantity: int = 1
    ) -> Tuple[CartItemModel, bool]:
        """Zwraca (pozycja, czy_nowa)."""
        user_id = _require_user(ctx)

        if quantity <= 0:
            raise ValidationError("Quantity must be at least 1")

        if not self.products.get_product(product_id):
            raise NotFoundError("Product not found")

        existing = self.repo.get_cart_item(user_id, product_id)

        if existing:
            logger.info(
                f"Produkt {product_id} juz jest w koszyku {user_id}, zwiekszam ilosc "
                f"z {existing.quantity} do {existing.quantity + quantity}"
            )
            existing.quantity += quantity
            self.repo.commit()
            return existing, False

        item = self.repo.add_cart_item(
            CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity)
        )
        self.repo.commit()

        logger.info(f"Dodano produkt {product_id} do koszyka uzytkownika {user_id}")
        return item, True

    def update_quantity(
        self, ctx: AuthContext | None, item_id: int, quantity: int | None
    ) -> CartItemModel:
        user_id = _require_user(ctx)

        if quantity is None:
            raise ValidationError("quantity required")
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        item = self._owned_item(user_id, item_id)
        item.quantity = quantity
        self.repo.commit()

        logger.info(f"Pozycja {item_id} koszyka {user_id}: ilosc {quantity}")
        return item

    def remove_from_cart(self, ctx: AuthContext | None, item_id: int) -> None:
        user_id = _require_user(ctx)

        item = self._owned_item(user_id, item_id)
        self.repo.delete_cart_item(item)
        self.repo.commit()

        logger.info(f"Usunieto pozycje {item_id} z koszyka {user_id}")

    def clear_cart(self, ctx: AuthContext | None) -> int:
        user_id = _require_user(ctx)

        removed = self.repo.clear(user_id)
        self.repo.commit()

        logger.info(f"Wyczyszczono koszyk {user_id} ({removed} pozycji)")
        return removed

    def _owned_item(self, user_id: int, item_id: int) -> CartItemModel:
        item = self.repo.get_item(item_id)
        # cudza pozycja wyglada jak nieistniejaca
        if not item or item.user_id != user_id:
            raise NotFoundError("Cart item not found")
        return item
