#canteen/api/routers/carts.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from canteen.api.deps import get_current_user, get_db
from canteen.domain.context import AuthContext
from canteen.domain.schemas import CartItemOut, CartOut, ItemIn, MessageOut, QuantityIn
from canteen.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(ctx: AuthContext = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).get_cart(ctx)


@router.post("", response_model=CartItemOut)
def add_item(
    payload: ItemIn,
    response: Response,
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item, created = get_service(db).add_to_cart(ctx, payload.product_id, payload.quantity)
    # nowa linia -> 201, zwiekszenie ilosci istniejacej -> 200
    response.status_code = 201 if created else 200
    return item


@router.put("/{item_id}", response_model=CartItemOut)
def update_item(
    item_id: int,
    payload: QuantityIn,
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update_quantity(ctx, item_id, payload.quantity)


@router.delete("/{item_id}", response_model=MessageOut)
def remove_item(
    item_id: int,
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).remove_from_cart(ctx, item_id)
    return {"message": "Item removed"}


@router.delete("", response_model=MessageOut)
def clear_cart(ctx: AuthContext = Depends(get_current_user), db: Session = Depends(get_db)):
    get_service(db).clear_cart(ctx)
    return {"message": "Cart cleared"}
