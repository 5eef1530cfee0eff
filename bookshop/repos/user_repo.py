from sqlalchemy import select
from sqlalchemy.orm import Session
from bookshop.data.models.user import UserModel

class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_user_by_username(self, username: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.username == username)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
