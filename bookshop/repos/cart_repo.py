# bookshop/repos/cart_repo.py
from datetime import datetime, timezone
from typing import Iterable, List

from sqlalchemy import select, delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from bookshop.data.models.cart import CartModel


class CartRepo:
    """
    Persistence of one cart row per user.
    Nothing here commits: every write runs in the caller's unit of work.
    """

    def __init__(self, db: Session):
        self.db = db

    def _insert(self):
        #ON CONFLICT lives in the dialect specific insert
        if self.db.get_bind().dialect.name == "postgresql":
            return pg_insert(CartModel)
        return sqlite_insert(CartModel)

    def get_cart(self, user_id: int) -> CartModel | None:
        return self.db.get(CartModel, user_id)

    def ensure_cart(self, user_id: int) -> None:
        # INSERT ... ON CONFLICT (user_id) DO NOTHING
        # a concurrent first insert for the same user blocks here on the unique
        # key until the other transaction finishes
        stmt = self._insert().values(user_id=user_id, book_ids=[])
        stmt = stmt.on_conflict_do_nothing(index_elements=[CartModel.user_id])
        self.db.execute(stmt)

    def get_book_ids_for_update(self, user_id: int) -> List[int] | None:
        """Locks the cart row (SELECT ... FOR UPDATE) and returns its book ids."""
        stmt = (
            select(CartModel.book_ids)
            .where(CartModel.user_id == user_id)
            .with_for_update()
        )
        book_ids = self.db.execute(stmt).scalar_one_or_none()
        if book_ids is None:
            return None
        return list(book_ids)

    def upsert_cart(self, user_id: int, book_ids: Iterable[int]) -> None:
        # INSERT ... ON CONFLICT (user_id) DO UPDATE SET book_ids = EXCLUDED.book_ids
        now = datetime.now(timezone.utc)
        stmt = self._insert().values(user_id=user_id, book_ids=list(book_ids), updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CartModel.user_id],
            set_={
                "book_ids": stmt.excluded.book_ids,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        self.db.execute(stmt)

    def delete_cart(self, user_id: int) -> bool:
        result = self.db.execute(
            delete(CartModel)
            .where(CartModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def get_expired_carts(self, older_than: datetime) -> List[CartModel]:
        #skip rows held by in-flight cart updates, the next sweep picks them up
        stmt = (
            select(CartModel)
            .where(CartModel.updated_at < older_than)
            .order_by(CartModel.user_id)
            .with_for_update(skip_locked=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def delete_carts(self, user_ids: Iterable[int]) -> int:
        ids = list(user_ids)
        if not ids:
            return 0
        result = self.db.execute(
            delete(CartModel)
            .where(CartModel.user_id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
