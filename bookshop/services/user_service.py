
from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshop.data.models.user import UserModel
from bookshop.domain.errors import AlreadyExists, InvalidInput, NotFound
from bookshop.domain.schemas import UserRead
from bookshop.repos.user_repo import UserRepo
from bookshop.services.token_service import TokenService
from bookshop.utils.settings import ADMIN_USERNAMES
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)

#argon2id with the library's recommended parameters
password_hash = PasswordHash.recommended()


def hash_password(password: str) -> str:
    return password_hash.hash(password)


def check_password(password: str, stored: str) -> bool:
    try:
        return password_hash.verify(password, stored)
    except UnknownHashError:
        return False


class UserService:
    def __init__(self, db: Session, token_service: TokenService):
        self.repo = UserRepo(db)
        self.token_service = token_service

    def sign_up(self, username: str, password: str) -> UserRead:
        if self.repo.get_user_by_username(username):
            raise AlreadyExists(f"user {username} already exists")

        user = UserModel(
            username=username,
            password=hash_password(password),
            admin=username in ADMIN_USERNAMES,
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError as e:
            #lost the race against a concurrent sign up with the same name
            self.repo.db.rollback()
            raise AlreadyExists(f"user {username} already exists") from e

        logger.info("Created user", user_id=created.id, username=created.username)
        return UserRead.model_validate(created)

    def sign_in(self, username: str, password: str) -> str:
        user = self.repo.get_user_by_username(username)
        if not user:
            raise NotFound("user not found")
        if not check_password(password, user.password):
            raise InvalidInput("invalid password")
        return self.token_service.generate_token(UserRead.model_validate(user))

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("user not found")
        return UserRead.model_validate(user)
