# bookshop/domain/book.py
from dataclasses import dataclass

from bookshop.domain.errors import InvalidInput


@dataclass
class Book:
    """
    Catalog entry. Price is in minor currency units.
    `id` is None until the book has been stored.
    """

    title: str
    year: int
    author: str
    price: int
    stock: int
    category_id: int
    id: int | None = None

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise InvalidInput("title must not be empty")
        if not self.author or not self.author.strip():
            raise InvalidInput("author must not be empty")
        if self.price < 0:
            raise InvalidInput("price must not be negative")
        if self.stock < 0:
            raise InvalidInput("stock must not be negative")
        if self.category_id <= 0:
            raise InvalidInput("category id must be positive")
        if self.id is not None and self.id <= 0:
            raise InvalidInput("book id must be positive")


@dataclass
class Category:
    name: str
    id: int | None = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise InvalidInput("category name must not be empty")
