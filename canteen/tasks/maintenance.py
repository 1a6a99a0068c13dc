# canteen/tasks/maintenance.py
import random
import sys

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from canteen.celery_worker import celery_app
from canteen.data.database import Database
from canteen.repos.product_repo import ProductRepo
from canteen.services.product_service import make_slug
from canteen.utils.logging import get_logger
from canteen.utils.settings import Settings

logger = get_logger(__name__)

DEFAULT_BRAND = "Generic"


def repair_products(db: Session) -> int:
    """Uzupelnia slug, sku i brand w produktach, ktorym ich brakuje."""
    repo = ProductRepo(db)
    products = repo.list_all()
    logger.info(f"Checking {len(products)} products")

    repaired = 0
    for product in products:
        changed = False
        if not product.slug:
            product.slug = make_slug(product.name, product.id)
            changed = True
        if not product.sku:
            product.sku = f"PROD-{product.id}-{random.randint(0, 999)}"
            changed = True
        if not product.brand:
            product.brand = DEFAULT_BRAND
            changed = True
        repaired += changed

    repo.commit()
    logger.info(f"Repaired {repaired} products")
    return repaired


@celery_app.task(name="canteen.tasks.maintenance.repair_products_task")
def repair_products_task():
    database = Database(Settings.from_env().database_url)
    db = database.SessionLocal()
    try:
        return repair_products(db)
    finally:
        db.close()
        database.dispose()


def main() -> int:
    database = Database(Settings.from_env().database_url)
    db = database.SessionLocal()
    try:
        repair_products(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Product repair failed: {e}")
        return 1
    finally:
        db.close()
        database.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
