# canteen/services/product_service.py
import math
import re
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from canteen.data.models.product import DEFAULT_PRODUCT_IMAGE, ProductModel
from canteen.domain.errors import ConflictError, NotFoundError, ValidationError
from canteen.domain.schemas import ProductIn
from canteen.repos.product_repo import ProductRepo
from canteen.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100
ALL_CATEGORIES = "All"


def make_slug(name: str, product_id: int) -> str:
    base = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return f"{base}-{product_id}"


class ProductService:
    """Katalog: publiczne zapytania i zmiany z panelu admina."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    #query
    def list_products(
        self,
        page: int | None = None,
        limit: int | None = None,
        search: str | None = None,
        category: str | None = None,
        featured: bool = False,
    ) -> Dict[str, Any]:
        limit = min(max(limit or DEFAULT_PAGE_SIZE, 1), MAX_PAGE_SIZE)
        page = max(page or 1, 1)

        if category == ALL_CATEGORIES:
            category = None

        items, total = self.repo.search_active(
            offset=(page - 1) * limit,
            limit=limit,
            search=(search or "").strip() or None,
            category=category or None,
            featured=featured,
        )
        total_pages = math.ceil(total / limit)

        return {
            "items": items,
            "page": page,
            "total_pages": total_pages,
            "total": total,
            "has_more": page < total_pages,
        }

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        # nieaktywny produkt jest dla klienta niewidoczny
        if not product or not product.is_active:
            raise NotFoundError("Product not found")
        return product

    #commands
    def create_product(self, payload: ProductIn, image: str | None = None) -> ProductModel:
        if not payload.name or not payload.category or payload.price is None:
            raise ValidationError("Missing required fields")

        product = ProductModel(
            name=payload.name,
            category=payload.category,
            description=payload.description,
            brand=payload.brand,
            sku=payload.sku or None,
            slug=payload.slug or None,
            price=payload.price,
            discount_price=payload.discount_price,
            stock=payload.stock or 0,
            image=image or payload.image_url or DEFAULT_PRODUCT_IMAGE,
            is_active=True if payload.is_active is None else payload.is_active,
            is_featured=bool(payload.is_featured),
        )

        try:
            self.repo.add_product(product)
            if not product.slug:
                product.slug = make_slug(product.name, product.id)
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Product with this SKU or slug already exists")

        logger.info(f"Utworzono produkt {product.id} ({product.name})")
        return product

    def update_product(
        self, product_id: int, payload: ProductIn, image: str | None = None
    ) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        changes = payload.model_dump(exclude_unset=True, exclude={"image_url"})
        for field, value in changes.items():
            if value is None and field in ("name", "category", "price", "stock", "is_active", "is_featured"):
                continue
            setattr(product, field, value)

        # zdjecie zmieniamy tylko gdy przyszedl nowy plik albo URL
        if image or payload.image_url:
            product.image = image or payload.image_url

        try:
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Product with this SKU or slug already exists")

        logger.info(f"Zaktualizowano produkt {product.id}: {sorted(changes)}")
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        # twarde usuniecie, pozycje koszykow leca kaskadowo
        self.repo.delete_product(product)
        self.repo.commit()
        logger.info(f"Usunieto produkt {product_id}")
