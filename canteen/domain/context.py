# canteen/domain/context.py
from dataclasses import dataclass

from canteen.data.models.user import UserModel

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class AuthContext:
    """Zalogowany uzytkownik przekazywany jawnie do serwisow."""

    user: UserModel
    admin_email: str = ""

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def email(self) -> str | None:
        return self.user.email

    @property
    def role(self) -> str:
        return self.user.role

    @property
    def is_admin(self) -> bool:
        if self.role == ADMIN_ROLE:
            return True
        # konto "god mode" z ADMIN_EMAIL, pusty env nic nie dopasowuje
        return bool(self.admin_email) and self.email == self.admin_email
