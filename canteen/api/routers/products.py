# canteen/api/routers/products.py
from decimal import Decimal

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from canteen.api.deps import get_db, get_image_storage, require_admin
from canteen.domain.context import AuthContext
from canteen.domain.errors import ValidationError
from canteen.domain.schemas import MessageOut, ProductIn, ProductOut, ProductPageOut
from canteen.services.image_storage import ImageStorage
from canteen.services.product_service import ProductService

router = APIRouter(prefix="/api/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


def product_form(
    name: str | None = Form(None),
    category: str | None = Form(None),
    price: Decimal | None = Form(None),
    stock: int | None = Form(None),
    description: str | None = Form(None),
    brand: str | None = Form(None),
    sku: str | None = Form(None),
    discount_price: Decimal | None = Form(None, alias="discountPrice"),
    is_featured: bool | None = Form(None, alias="isFeatured"),
    is_active: bool | None = Form(None, alias="isActive"),
) -> ProductIn:
    # tylko pola faktycznie wyslane, zeby update nie nadpisywal reszty
    fields = {
        "name": name,
        "category": category,
        "price": price,
        "stock": stock,
        "description": description,
        "brand": brand,
        "sku": sku,
        "discount_price": discount_price,
        "is_featured": is_featured,
        "is_active": is_active,
    }
    try:
        return ProductIn(**{k: v for k, v in fields.items() if v is not None and v != ""})
    except PydanticValidationError as e:
        raise ValidationError(e.errors()[0]["msg"])


def upload_image(image: UploadFile | None, storage: ImageStorage) -> str | None:
    if image is None or not image.filename:
        return None
    return storage.upload(image.filename, image.file.read())


@router.get("", response_model=ProductPageOut)
def list_products(
    page: int = Query(1),
    limit: int = Query(12),
    search: str | None = Query(None),
    category: str | None = Query(None),
    is_featured: bool = Query(False, alias="isFeatured"),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return svc.list_products(
        page=page, limit=limit, search=search, category=category, featured=is_featured
    )


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_product(product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductIn = Depends(product_form),
    image: UploadFile | None = File(None),
    admin: AuthContext = Depends(require_admin),
    storage: ImageStorage = Depends(get_image_storage),
    db: Session = Depends(get_db),
):
    image_url = upload_image(image, storage)
    return get_service(db).create_product(payload, image=image_url)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductIn = Depends(product_form),
    image: UploadFile | None = File(None),
    admin: AuthContext = Depends(require_admin),
    storage: ImageStorage = Depends(get_image_storage),
    db: Session = Depends(get_db),
):
    image_url = upload_image(image, storage)
    return get_service(db).update_product(product_id, payload, image=image_url)


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int,
    admin: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    get_service(db).delete_product(product_id)
    return {"message": "Product deleted successfully"}
