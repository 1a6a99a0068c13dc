from typing import Iterable

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from canteen.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids: Iterable[int]) -> list[ProductModel]:
        ids = list(product_ids)
        if not ids:
            return []
        return list(
            self.db.execute(select(ProductModel).where(ProductModel.id.in_(ids))).scalars()
        )

    def get_products_for_update(self, product_ids: Iterable[int]) -> dict[int, ProductModel]:
        # SELECT ... FOR UPDATE, SQLite ignoruje
        stmt = (
            select(ProductModel)
            .where(ProductModel.id.in_(list(product_ids)))
            .order_by(ProductModel.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {p.id: p for p in self.db.execute(stmt).scalars()}

    def search_active(
        self,
        offset: int,
        limit: int,
        search: str | None = None,
        category: str | None = None,
        featured: bool | None = None,
    ) -> tuple[list[ProductModel], int]:
        conditions = [ProductModel.is_active.is_(True)]

        if search:
            pattern = f"%{search}%"
            matches = [
                ProductModel.name.ilike(pattern),
                ProductModel.brand.ilike(pattern),
                ProductModel.description.ilike(pattern),
                ProductModel.sku.ilike(pattern),
            ]
            term = search.strip()
            # isdigit przepuszcza np. "²", int() juz nie
            if term.isascii() and term.isdigit():
                matches.append(ProductModel.id == int(term))
            conditions.append(or_(*matches))

        if category:
            conditions.append(ProductModel.category == category)

        if featured:
            conditions.append(ProductModel.is_featured.is_(True))

        total = self.db.execute(
            select(func.count(ProductModel.id)).where(*conditions)
        ).scalar_one()

        items = list(
            self.db.execute(
                select(ProductModel)
                .where(*conditions)
                .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
                .offset(offset)
                .limit(limit)
            ).scalars()
        )
        return items, total

    def list_all(self) -> list[ProductModel]:
        return list(self.db.execute(select(ProductModel).order_by(ProductModel.id)).scalars())

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)

    def decrement_stock(self, product: ProductModel, quantity: int) -> None:
        product.stock = ProductModel.stock - quantity

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
