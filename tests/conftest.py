"""
Pytest configuration and fixtures.

Every test gets its own file-backed SQLite database so that several threads
can open real, competing transactions against it.
"""
import pytest
from sqlalchemy.orm import sessionmaker

from bookshop.data.database import make_engine, init_db
from bookshop.data.models.book import BookModel
from bookshop.data.models.cart import CartModel
from bookshop.data.models.category import CategoryModel


@pytest.fixture
def db_engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'bookshop.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def category_id(session_factory):
    with session_factory() as s:
        category = CategoryModel(name="Dystopia")
        s.add(category)
        s.commit()
        return category.id


@pytest.fixture
def add_book(session_factory, category_id):
    """Stores a book and returns its id."""

    def _add(stock=10, title="1984", author="George Orwell", price=1500, year=1949):
        with session_factory() as s:
            book = BookModel(
                title=title,
                year=year,
                author=author,
                price=price,
                stock=stock,
                category_id=category_id,
            )
            s.add(book)
            s.commit()
            return book.id

    return _add


@pytest.fixture
def stock_of(session_factory):
    def _stock(book_id):
        with session_factory() as s:
            return s.get(BookModel, book_id).stock

    return _stock


@pytest.fixture
def stored_cart(session_factory):
    """Book ids persisted for a user, or None when there is no row."""

    def _cart(user_id):
        with session_factory() as s:
            cart = s.get(CartModel, user_id)
            return None if cart is None else list(cart.book_ids)

    return _cart
