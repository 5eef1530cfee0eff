# bookshop/services/cart_service.py
from datetime import timedelta
from functools import wraps
from typing import Any, Dict, Iterable

from sqlalchemy.exc import SQLAlchemyError

from bookshop.domain.errors import InvalidInput, TransactionFailure
from bookshop.domain.schemas import UserRead
from bookshop.services.cart_engine import CartEngine
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)


def _storage_errors_as_failures(fn):
    #raw driver errors from plain reads never leave the service layer
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(f"{fn.__name__} failed at the storage layer: {e}")
            raise TransactionFailure("storage error", e) from e

    return wrapper


class CartService:
    """
    Cart use cases for an already authenticated caller.
    commands (update, checkout, delete, clean) go through the engine's units of work
    queries (get, check) are plain reads
    """

    def __init__(self, engine: CartEngine):
        self.engine = engine

    @staticmethod
    def _user_id(user: UserRead) -> int:
        if user is None or user.id <= 0:
            raise InvalidInput("invalid user")
        return user.id

    #query
    @_storage_errors_as_failures
    def get_cart(self, user: UserRead) -> Dict[str, Any]:
        return self.engine.get_cart(self._user_id(user)).to_dict()

    @_storage_errors_as_failures
    def check_stocks(self, user: UserRead) -> bool:
        cart = self.engine.get_cart(self._user_id(user))
        return self.engine.check_stocks(cart)

    #commands
    @_storage_errors_as_failures
    def update_cart(self, user: UserRead, book_ids: Iterable[int]) -> Dict[str, Any]:
        user_id = self._user_id(user)
        book_ids = list(book_ids)
        logger.info(f"User {user_id} sets cart to {book_ids}")
        return self.engine.update_cart_and_stocks(user_id, book_ids).to_dict()

    @_storage_errors_as_failures
    def checkout(self, user: UserRead) -> None:
        self.engine.checkout(self._user_id(user))

    @_storage_errors_as_failures
    def delete_cart(self, user: UserRead) -> None:
        self.engine.delete_cart(self._user_id(user))

    @_storage_errors_as_failures
    def clean_expired_carts(self, max_age: timedelta) -> int:
        return self.engine.clean_expired_carts(max_age)
