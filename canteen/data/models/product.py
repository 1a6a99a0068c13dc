from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from canteen.data.database import Base

DEFAULT_PRODUCT_IMAGE = "📦"


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=True)
    sku = Column(String, unique=True, nullable=True)
    brand = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False, index=True)

    price = Column(Numeric(10, 2), nullable=False)
    discount_price = Column(Numeric(10, 2), nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    image = Column(String, nullable=True, default=DEFAULT_PRODUCT_IMAGE)

    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    cart_items = relationship(
        "CartItemModel",
        back_populates="product",
        cascade="all, delete-orphan",
    )
    # bez kaskady: po usunieciu produktu order_items.product_id = NULL
    order_items = relationship("OrderItemModel", back_populates="product")

    __table_args__ = (CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),)
