# bookshop/services/cart_engine.py
import threading
from datetime import datetime, timezone, timedelta
from typing import Iterable

from sqlalchemy.orm import Session, sessionmaker

from bookshop.data.transaction import run_in_transaction
from bookshop.domain.cart import Cart, CartDiff
from bookshop.domain.errors import (
    BookshopError,
    InvalidInput,
    NotEnoughStock,
    NotFound,
    TransactionFailure,
)
from bookshop.repos.book_repo import BookRepo
from bookshop.repos.cart_repo import CartRepo
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)


class CartEngine:
    """
    Keeps carts and book stock consistent under concurrent access.

    Stock is reserved when a unit enters a cart and released when it leaves,
    so checkout only finalizes: it never touches stock again. Every mutating
    operation is one unit of work; all contention is resolved by the database
    (row locks from conditional updates and the carts unique key), there is no
    in-process locking and no automatic retry.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _run(self, work, cancel_event: threading.Event | None = None):
        try:
            return run_in_transaction(self.session_factory, work, cancel_event)
        except TransactionFailure as e:
            #business errors raised inside the unit of work go back to the caller as-is
            if isinstance(e.cause, BookshopError) and not isinstance(e.cause, TransactionFailure):
                raise e.cause from e
            logger.error("Transaction failed", error=str(e))
            raise

    def _ensure_books_exist(self, cart: Cart) -> None:
        wanted = cart.distinct_book_ids()
        if not wanted:
            return
        db = self.session_factory()
        try:
            found = {b.id for b in BookRepo(db).get_books_by_ids(wanted)}
        finally:
            db.close()

        missing = [b for b in wanted if b not in found]
        if missing:
            raise InvalidInput(f"books do not exist: {missing}")

    #query
    def get_cart(self, user_id: int) -> Cart:
        db = self.session_factory()
        try:
            cart = CartRepo(db).get_cart(user_id)
        finally:
            db.close()

        #empty list is stored only transiently, treat it as no cart
        if not cart or not cart.book_ids:
            raise NotFound(f"cart for user {user_id} not found")
        return Cart(user_id=cart.user_id, book_ids=list(cart.book_ids))

    def check_stocks(self, cart: Cart) -> bool:
        """
        True when every book in the cart currently has at least as much stock
        as the cart asks for. Read only, independent of reservations.
        """
        quantities = cart.quantities()
        db = self.session_factory()
        try:
            stocks = BookRepo(db).get_stocks(quantities)
        finally:
            db.close()

        missing = sorted(set(quantities) - set(stocks))
        if missing:
            raise NotFound(f"books not found: {missing}")

        return all(stocks[book_id] >= count for book_id, count in quantities.items())

    #commands
    def update_cart_and_stocks(
        self,
        user_id: int,
        book_ids: Iterable[int],
        cancel_event: threading.Event | None = None,
    ) -> Cart:
        """
        Sets the user's cart to exactly `book_ids` and moves stock by the
        difference: one conditional decrement per added unit, one increment
        per removed unit. Any unit that cannot be reserved fails the whole
        call with NotEnoughStock and nothing is kept.
        """
        cart = Cart(user_id=user_id, book_ids=list(book_ids))
        self._ensure_books_exist(cart)

        def work(db: Session) -> CartDiff:
            carts = CartRepo(db)
            books = BookRepo(db)

            #make sure a row exists so the lock below always has something to hold
            carts.ensure_cart(cart.user_id)
            previous = carts.get_book_ids_for_update(cart.user_id) or []
            diff = CartDiff.between(previous, cart.book_ids)

            if cart.is_empty:
                carts.delete_cart(cart.user_id)
            else:
                carts.upsert_cart(cart.user_id, cart.book_ids)

            #one pass in ascending book id, reservations and releases alike,
            #so concurrent updates lock shared book rows in the same order
            for book_id, delta in diff.changes():
                for _ in range(delta):
                    if not books.decrement_stock(book_id):
                        raise NotEnoughStock(book_id)
                for _ in range(-delta):
                    books.increment_stock(book_id)

            return diff

        try:
            diff = self._run(work, cancel_event)
        except NotEnoughStock as e:
            logger.warning("Cart update rejected", user_id=cart.user_id, book_id=e.book_id)
            raise

        if diff.is_empty:
            logger.info("Cart rewritten without stock changes", user_id=cart.user_id)
        else:
            logger.info(
                "Cart updated",
                user_id=cart.user_id,
                items=len(cart.book_ids),
                reserved=sum(diff.added.values()),
                released=sum(diff.removed.values()),
            )
        return cart

    def checkout(self, user_id: int, cancel_event: threading.Event | None = None) -> None:
        """
        Finalizes the cart and removes it. Stock was reserved when the books
        were added, so it is not decremented a second time here.
        """
        if user_id <= 0:
            raise InvalidInput("user id must be positive")

        def work(db: Session) -> int:
            carts = CartRepo(db)
            book_ids = carts.get_book_ids_for_update(user_id)
            if not book_ids:
                raise NotFound(f"cart for user {user_id} not found")
            carts.delete_cart(user_id)
            return len(book_ids)

        try:
            count = self._run(work, cancel_event)
        except NotFound:
            logger.warning("Checkout without a cart", user_id=user_id)
            raise

        logger.info("Checked out", user_id=user_id, items=count)

    def delete_cart(self, user_id: int) -> None:
        """
        Drops the cart and returns its reserved units to stock.
        Same as setting the cart to an empty list.
        """
        self.update_cart_and_stocks(user_id, [])

    def clean_expired_carts(self, max_age: timedelta) -> int:
        """
        Removes carts not updated for longer than `max_age` and returns their
        reserved units to stock. Returns how many carts were removed.
        """
        cutoff = datetime.now(timezone.utc) - max_age

        def work(db: Session) -> int:
            carts = CartRepo(db)
            books = BookRepo(db)

            expired = carts.get_expired_carts(cutoff)
            released = sorted(b for c in expired for b in c.book_ids)
            removed = carts.delete_carts(c.user_id for c in expired)

            #books deleted from the catalog meanwhile just match no row
            for book_id in released:
                books.increment_stock(book_id)
            return removed

        removed = self._run(work)
        if removed:
            logger.info("Removed expired carts", removed=removed)
        return removed
