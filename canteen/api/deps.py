# canteen/api/deps.py
from typing import Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from canteen.domain.context import AuthContext
from canteen.domain.errors import ForbiddenError, UnauthenticatedError
from canteen.services.auth_service import AuthService
from canteen.services.image_storage import ImageStorage
from canteen.services.payment_client import RazorpayClient
from canteen.services.payment_service import PaymentService
from canteen.utils.security import PasswordHasher
from canteen.utils.settings import Settings

TOKEN_COOKIE = "token"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    yield from request.app.state.database.session()


def get_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(settings.bcrypt_salt_rounds)


def extract_token(request: Request) -> str | None:
    """Bearer z naglowka Authorization, w drugiej kolejnosci cookie `token`."""
    header = request.headers.get("Authorization")
    if header:
        if header.startswith("Bearer "):
            return header[len("Bearer "):].strip() or None
        return header.strip() or None
    return request.cookies.get(TOKEN_COOKIE) or None


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthContext:
    return AuthService(db, settings).authenticate(extract_token(request))


def require_admin(ctx: AuthContext = Depends(get_current_user)) -> AuthContext:
    if ctx is None:
        raise UnauthenticatedError("Unauthorized: No user found")
    if not ctx.is_admin:
        raise ForbiddenError("Forbidden: Admins only")
    return ctx


def get_payment_service(settings: Settings = Depends(get_settings)) -> PaymentService:
    return PaymentService(RazorpayClient(settings), settings)


def get_image_storage(settings: Settings = Depends(get_settings)) -> ImageStorage:
    return ImageStorage(settings)
