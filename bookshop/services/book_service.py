# bookshop/services/book_service.py
from typing import Iterable, List

from sqlalchemy.orm import Session

from bookshop.data.models.book import BookModel
from bookshop.domain.book import Book
from bookshop.domain.errors import NotFound
from bookshop.domain.schemas import BookIn, BookOut
from bookshop.repos.book_repo import BookRepo
from bookshop.repos.category_repo import CategoryRepo
from bookshop.utils.settings import BOOKS_PAGE_SIZE
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)


class BookService:
    def __init__(self, db: Session):
        self.repo = BookRepo(db)
        self.categories = CategoryRepo(db)

    def _check_category(self, category_id: int) -> None:
        if not self.categories.get_category(category_id):
            raise NotFound(f"category {category_id} not found")

    def get_book(self, book_id: int) -> BookOut:
        book = self.repo.get_book(book_id)
        if not book:
            raise NotFound(f"book {book_id} not found")
        return BookOut.model_validate(book)

    def get_books(self, category_ids: Iterable[int] = (), page: int = 1) -> List[BookOut]:
        """page < 1 turns paging off and returns every matching book."""
        limit, offset = 0, 0
        if page > 0:
            limit = BOOKS_PAGE_SIZE
            offset = (page - 1) * limit
        books = self.repo.get_books(category_ids, limit=limit, offset=offset)
        return [BookOut.model_validate(b) for b in books]

    def create_book(self, payload: BookIn) -> BookOut:
        #domain validation, raises InvalidInput
        book = Book(
            title=payload.title,
            year=payload.year,
            author=payload.author,
            price=payload.price,
            stock=payload.stock,
            category_id=payload.category_id,
        )
        self._check_category(book.category_id)

        created = self.repo.create_book(
            BookModel(
                title=book.title,
                year=book.year,
                author=book.author,
                price=book.price,
                stock=book.stock,
                category_id=book.category_id,
            )
        )
        logger.info(f"Created book {created.id} '{created.title}' with stock {created.stock}")
        return BookOut.model_validate(created)

    def update_book(self, book_id: int, payload: BookIn) -> BookOut:
        current = self.repo.get_book(book_id)
        if not current:
            raise NotFound(f"book {book_id} not found")

        #stock stays as stored, only reservations move it
        book = Book(
            id=book_id,
            title=payload.title,
            year=payload.year,
            author=payload.author,
            price=payload.price,
            stock=current.stock,
            category_id=payload.category_id,
        )
        self._check_category(book.category_id)

        updated = self.repo.update_book(
            book_id,
            {
                "title": book.title,
                "year": book.year,
                "author": book.author,
                "price": book.price,
                "category_id": book.category_id,
            },
        )
        if not updated:
            raise NotFound(f"book {book_id} not found")
        return BookOut.model_validate(updated)

    def delete_book(self, book_id: int) -> None:
        if not self.repo.delete_book(book_id):
            raise NotFound(f"book {book_id} not found")
        logger.info(f"Deleted book {book_id}")
