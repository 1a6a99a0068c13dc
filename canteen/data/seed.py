# canteen/data/seed.py
import sys
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from canteen.data.database import Database
from canteen.data.models.product import ProductModel
from canteen.data.models.user import UserModel
from canteen.utils.logging import get_logger
from canteen.utils.security import PasswordHasher
from canteen.utils.settings import Settings

logger = get_logger(__name__)

DEMO_EMAIL = "demo@sainik.com"

PRODUCTS = [
    ("Samsung Galaxy S23", "Electronics", "799.00", 15, "📱", "Latest Samsung flagship smartphone"),
    ("Sony Headphones WH-1000XM5", "Electronics", "399.00", 20, "🎧", "Premium noise-cancelling headphones"),
    ('LG 55" 4K Smart TV', "Electronics", "1299.00", 8, "📺", "Ultra HD Smart TV"),
    ("Dell Laptop Inspiron 15", "Electronics", "899.00", 12, "💻", "Powerful laptop"),
    ("Rice (5kg)", "Grocery", "12.00", 50, "🌾", "Premium basmati rice"),
    ("Cooking Oil (2L)", "Grocery", "8.00", 40, "🛢️", "Healthy cooking oil"),
    ("Milk (1L)", "Grocery", "3.00", 60, "🥛", "Fresh dairy milk"),
    ("Tea (500g)", "Grocery", "7.00", 40, "☕", "Premium tea"),
    ("Eggs (12 pack)", "Grocery", "4.50", 70, "🥚", "Farm fresh eggs"),
    ("Kitchen Utensils Set", "Other", "45.00", 25, "🍴", "Complete utensils set"),
    ("Bed Sheets Set", "Other", "35.00", 18, "🛏️", "Premium cotton sheets"),
    ("Water Bottles Set", "Other", "18.00", 50, "💧", "BPA-free bottles"),
]


def seed(db: Session, hasher: PasswordHasher) -> dict:
    created = {"users": 0, "products": 0}

    # not forcing: only seed if empty
    if not db.query(UserModel).filter(UserModel.email == DEMO_EMAIL).first():
        db.add(
            UserModel(
                email=DEMO_EMAIL,
                name="Demo User",
                password=hasher.hash("demo123"),
                phone="9876543210",
                address="123 Demo Street",
                city="New Delhi",
                state="Delhi",
                pincode="110001",
            )
        )
        created["users"] = 1

    if not db.query(ProductModel).first():
        for name, category, price, stock, image, description in PRODUCTS:
            db.add(
                ProductModel(
                    name=name,
                    category=category,
                    price=Decimal(price),
                    stock=stock,
                    image=image,
                    description=description,
                    is_featured=category == "Electronics",
                )
            )
        created["products"] = len(PRODUCTS)

    db.commit()
    logger.info(f"Seed done: {created}")
    return created


def main() -> int:
    settings = Settings.from_env()
    database = Database(settings.database_url)
    db = database.SessionLocal()
    try:
        database.create_all()
        seed(db, PasswordHasher(settings.bcrypt_salt_rounds))
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Seed failed: {e}")
        return 1
    finally:
        db.close()
        database.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
