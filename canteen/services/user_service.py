from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from canteen.data.models.user import UserModel
from canteen.domain.context import ADMIN_ROLE, AuthContext
from canteen.domain.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from canteen.domain.schemas import UserCreateIn, UserUpdateIn
from canteen.repos.user_repo import UserRepo
from canteen.utils.logging import get_logger
from canteen.utils.security import PasswordHasher

logger = get_logger(__name__)

ROLES = ("customer", ADMIN_ROLE)


class UserService:
    def __init__(self, db: Session, hasher: PasswordHasher):
        self.repo = UserRepo(db)
        self.hasher = hasher

    def list_users(self) -> list[UserModel]:
        return self.repo.list_users()

    def get_user(self, ctx: AuthContext, user_id: int) -> UserModel:
        if ctx.user_id != user_id and not ctx.is_admin:
            raise ForbiddenError("Access denied")

        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_user(self, payload: UserCreateIn) -> UserModel:
        if not payload.name or not payload.email or not payload.password:
            raise ValidationError("Name, email and password are required.")
        if payload.role not in ROLES:
            raise ValidationError("Invalid role")

        if self.repo.get_by_email(payload.email):
            raise ConflictError("User already exists")

        user = self.repo.create_user(
            UserModel(
                name=payload.name,
                email=payload.email,
                phone=payload.phone or None,
                password=self.hasher.hash(payload.password),
                role=payload.role,
            )
        )
        logger.info(f"Admin utworzyl uzytkownika {user.id} z rola {user.role}")
        return user

    def update_user(self, ctx: AuthContext, user_id: int, payload: UserUpdateIn) -> UserModel:
        user = self.get_user(ctx, user_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        if "role" in changes:
            if not ctx.is_admin:
                raise ForbiddenError("Only admins can change roles")
            if changes["role"] not in ROLES:
                raise ValidationError("Invalid role")

        password = changes.pop("password", None)
        if password:
            user.password = self.hasher.hash(password)

        for field, value in changes.items():
            setattr(user, field, value)

        try:
            self.repo.save(user)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Email or phone already registered")

        logger.info(f"Zaktualizowano profil {user_id}: {sorted(changes)}")
        return user

    def delete_user(self, user_id: int) -> None:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        self.repo.delete_user(user)
        logger.info(f"Usunieto uzytkownika {user_id}")
