# bookshop/domain/errors.py


class BookshopError(Exception):
    """Base class for every error the bookshop raises on purpose."""


class InvalidInput(BookshopError, ValueError):
    """Malformed identifiers or a reference to a book that does not exist."""


class NotFound(BookshopError, LookupError):
    pass


class AlreadyExists(BookshopError):
    pass


class InvalidToken(BookshopError):
    pass


class NotEnoughStock(BookshopError):
    """A unit could not be reserved because the book ran out of stock."""

    def __init__(self, book_id: int):
        super().__init__(f"not enough stock for book {book_id}")
        self.book_id = book_id


class TransactionFailure(BookshopError):
    """
    Unit of work failed at the storage layer.
    `cause` is the error that decided the outcome: the commit error, the
    rollback error, or the error raised by the work itself.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause


class TransactionCancelled(TransactionFailure):
    pass
