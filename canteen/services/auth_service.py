# canteen/services/auth_service.py
from datetime import timedelta
from typing import Any, Dict

import jwt
from sqlalchemy.orm import Session

from canteen.data.models.user import UserModel
from canteen.domain.context import ADMIN_ROLE, AuthContext
from canteen.domain.errors import (
    AuthError,
    ConflictError,
    InvalidPasswordError,
    UnauthenticatedError,
    UserNotFoundError,
    ValidationError,
)
from canteen.domain.schemas import LoginIn, RegisterIn
from canteen.repos.user_repo import UserRepo
from canteen.utils.logging import get_logger
from canteen.utils.security import PasswordHasher, TokenCodec
from canteen.utils.settings import Settings

logger = get_logger(__name__)


class AuthService:
    """
    Rejestracja, logowanie i weryfikacja tokenow.
    Token to JWT HS256 z {id, email}, ten sam trafia do naglowka i cookie.
    """

    def __init__(self, db: Session, settings: Settings):
        self.repo = UserRepo(db)
        self.settings = settings
        self.hasher = PasswordHasher(settings.bcrypt_salt_rounds)
        self.tokens = TokenCodec(settings.jwt_secret)

    def issue_token(self, user: UserModel) -> str:
        return self.tokens.encode(
            {"id": user.id, "email": user.email},
            timedelta(days=self.settings.jwt_expires_days),
        )

    #commands
    def register(self, payload: RegisterIn) -> Dict[str, Any]:
        if not payload.name or not payload.email or not payload.password:
            raise ValidationError("Name, email and password are required.")

        if self.repo.get_by_email(payload.email):
            raise ConflictError("Email already registered")

        if payload.phone and self.repo.get_by_phone(payload.phone):
            raise ConflictError("Phone number already registered")

        user = self.repo.create_user(
            UserModel(
                name=payload.name,
                email=payload.email,
                phone=payload.phone or None,
                password=self.hasher.hash(payload.password),
                address=payload.address,
                city=payload.city,
                state=payload.state,
                pincode=payload.pincode,
            )
        )

        logger.info(f"Zarejestrowano uzytkownika {user.id} ({user.email})")
        return {"user": user, "token": self.issue_token(user)}

    def login(self, payload: LoginIn) -> Dict[str, Any]:
        if not payload.identifier or not payload.password:
            raise ValidationError("Missing fields")

        user = self.repo.get_by_identifier(payload.identifier)
        if not user:
            raise UserNotFoundError("User not found. Please register first.")

        if not self.hasher.verify(payload.password, user.password):
            logger.info(f"Nieudane logowanie uzytkownika {user.id}")
            raise InvalidPasswordError("Invalid password")

        logger.info(f"Uzytkownik {user.id} zalogowany")
        return {"user": user, "token": self.issue_token(user)}

    def admin_login(self, email: str | None, password: str | None) -> Dict[str, Any]:
        if not email or not password:
            raise ValidationError("Email and password are required")

        admin = self.repo.get_by_email(email)
        if not admin or admin.role != ADMIN_ROLE:
            raise AuthError("Access Denied: Not an Admin")

        if not self.hasher.verify(password, admin.password):
            raise InvalidPasswordError("Invalid credentials")

        token = self.tokens.encode(
            {"id": admin.id, "role": admin.role},
            timedelta(days=self.settings.admin_jwt_expires_days),
        )
        logger.info(f"Admin {admin.id} zalogowany")
        return {"token": token, "admin": admin}

    #query
    def authenticate(self, token: str | None) -> AuthContext:
        if not token:
            raise UnauthenticatedError("No token provided")

        try:
            claims = self.tokens.decode(token)
        except jwt.ExpiredSignatureError:
            raise UnauthenticatedError("Token expired")
        except jwt.InvalidTokenError:
            raise UnauthenticatedError("Invalid token")

        user_id = claims.get("id")
        if not isinstance(user_id, int):
            raise UnauthenticatedError("Invalid token payload")

        user = self.repo.get_user(user_id)
        if not user:
            raise UnauthenticatedError("Invalid token")

        return AuthContext(user=user, admin_email=self.settings.admin_email)
