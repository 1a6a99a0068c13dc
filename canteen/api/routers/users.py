from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from canteen.api.deps import get_current_user, get_db, get_hasher, require_admin
from canteen.domain.context import AuthContext
from canteen.domain.schemas import (
    MessageOut,
    UserCreateIn,
    UserDetailOut,
    UserEnvelope,
    UserListOut,
    UserUpdateIn,
)
from canteen.repos.order_repo import OrderRepo
from canteen.services.user_service import UserService
from canteen.utils.security import PasswordHasher

router = APIRouter(prefix="/api/users", tags=["users"])


def get_service(db: Session = Depends(get_db), hasher: PasswordHasher = Depends(get_hasher)):
    return UserService(db, hasher)


@router.get("", response_model=UserListOut)
def list_users(
    admin: AuthContext = Depends(require_admin),
    service: UserService = Depends(get_service),
):
    return {"users": service.list_users()}


@router.post("", response_model=UserEnvelope, status_code=201)
def create_user(
    payload: UserCreateIn,
    admin: AuthContext = Depends(require_admin),
    service: UserService = Depends(get_service),
):
    return {"user": service.create_user(payload)}


@router.get("/{user_id}", response_model=UserDetailOut)
def get_user(
    user_id: int,
    ctx: AuthContext = Depends(get_current_user),
    service: UserService = Depends(get_service),
    db: Session = Depends(get_db),
):
    user = service.get_user(ctx, user_id)
    orders = OrderRepo(db).get_user_orders(user.id)
    return {"user": user, "orders": orders}


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: int,
    payload: UserUpdateIn,
    ctx: AuthContext = Depends(get_current_user),
    service: UserService = Depends(get_service),
):
    return {"user": service.update_user(ctx, user_id, payload)}


@router.delete("/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: int,
    admin: AuthContext = Depends(require_admin),
    service: UserService = Depends(get_service),
):
    service.delete_user(user_id)
    return {"message": "User removed successfully"}
