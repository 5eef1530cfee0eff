# bookshop/repos/book_repo.py
from typing import Dict, Iterable, List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from bookshop.data.models.book import BookModel


class BookRepo:
    """
    Catalog CRUD commits on its own, like the other repos.
    decrement_stock / increment_stock never commit: they run inside the
    caller's transaction so they share atomicity with the cart write.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_book(self, book_id: int) -> BookModel | None:
        return self.db.get(BookModel, book_id)

    def get_books(self, category_ids: Iterable[int] = (), limit: int = 0, offset: int = 0) -> List[BookModel]:
        stmt = select(BookModel).order_by(BookModel.id)
        category_ids = list(category_ids)
        if category_ids:
            stmt = stmt.where(BookModel.category_id.in_(category_ids))
        if limit > 0:
            stmt = stmt.limit(limit).offset(offset)
        return list(self.db.execute(stmt).scalars().all())

    def get_books_by_ids(self, book_ids: Iterable[int]) -> List[BookModel]:
        ids = set(book_ids)
        if not ids:
            return []
        stmt = select(BookModel).where(BookModel.id.in_(ids))
        return list(self.db.execute(stmt).scalars().all())

    def get_stocks(self, book_ids: Iterable[int]) -> Dict[int, int]:
        ids = set(book_ids)
        if not ids:
            return {}
        stmt = select(BookModel.id, BookModel.stock).where(BookModel.id.in_(ids))
        return {row.id: row.stock for row in self.db.execute(stmt)}

    def create_book(self, book: BookModel) -> BookModel:
        self.db.add(book)
        self.db.commit()
        self.db.refresh(book)
        return book

    def update_book(self, book_id: int, data: dict) -> BookModel | None:
        #stock only moves through reservations
        data = {k: v for k, v in data.items() if k not in ("id", "stock")}
        book = self.get_book(book_id)
        if not book:
            return None
        for key, value in data.items():
            setattr(book, key, value)
        self.db.commit()
        self.db.refresh(book)
        return book

    def delete_book(self, book_id: int) -> bool:
        book = self.get_book(book_id)
        if not book:
            return False
        self.db.delete(book)
        self.db.commit()
        return True

    def decrement_stock(self, book_id: int) -> bool:
        # UPDATE books SET stock = stock - 1 WHERE id = :id AND stock > 0
        # the row lock taken by the update serializes concurrent reservations,
        # the loser re-evaluates stock > 0 and gets 0 rows
        result = self.db.execute(
            update(BookModel)
            .where(BookModel.id == book_id, BookModel.stock > 0)
            .values(stock=BookModel.stock - 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def increment_stock(self, book_id: int) -> bool:
        result = self.db.execute(
            update(BookModel)
            .where(BookModel.id == book_id)
            .values(stock=BookModel.stock + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
