from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from canteen.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    def get_by_phone(self, phone: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.phone == phone)
        ).scalar_one_or_none()

    def get_by_identifier(self, identifier: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel)
            .where(or_(UserModel.email == identifier, UserModel.phone == identifier))
            .limit(1)
        ).scalar_one_or_none()

    def list_users(self) -> list[UserModel]:
        return list(
            self.db.execute(
                select(UserModel).order_by(UserModel.created_at.desc(), UserModel.id.desc())
            ).scalars()
        )

    def count_customers_since(self, start: datetime) -> int:
        return self.db.execute(
            select(func.count(UserModel.id)).where(
                UserModel.role == "customer",
                UserModel.created_at >= start,
            )
        ).scalar_one()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: UserModel) -> UserModel:
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user: UserModel) -> None:
        self.db.delete(user)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
