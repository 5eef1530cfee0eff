from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from bookshop.domain.cart import Cart
from bookshop.domain.errors import InvalidInput, NotEnoughStock, TransactionFailure
from bookshop.domain.schemas import UserRead
from bookshop.services.cart_engine import CartEngine
from bookshop.services.cart_service import CartService

ALICE = UserRead(id=1, username="alice")


@pytest.fixture
def engine():
    return MagicMock(spec=CartEngine)


def test_update_cart_delegates_to_engine(engine):
    engine.update_cart_and_stocks.return_value = Cart(user_id=1, book_ids=[1, 2])

    result = CartService(engine).update_cart(ALICE, iter([1, 2]))

    assert result == {"user_id": 1, "book_ids": [1, 2]}
    engine.update_cart_and_stocks.assert_called_once_with(1, [1, 2])


@pytest.mark.parametrize("user", [None, UserRead(id=0, username="ghost")])
def test_invalid_caller_never_reaches_engine(engine, user):
    svc = CartService(engine)

    with pytest.raises(InvalidInput):
        svc.update_cart(user, [1])
    with pytest.raises(InvalidInput):
        svc.checkout(user)

    engine.update_cart_and_stocks.assert_not_called()
    engine.checkout.assert_not_called()


def test_business_errors_pass_through(engine):
    engine.update_cart_and_stocks.side_effect = NotEnoughStock(3)

    with pytest.raises(NotEnoughStock):
        CartService(engine).update_cart(ALICE, [3])


def test_raw_storage_errors_become_transaction_failures(engine):
    engine.get_cart.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

    with pytest.raises(TransactionFailure) as exc:
        CartService(engine).get_cart(ALICE)

    assert isinstance(exc.value.cause, OperationalError)


def test_check_stocks_uses_stored_cart(engine):
    cart = Cart(user_id=1, book_ids=[4])
    engine.get_cart.return_value = cart
    engine.check_stocks.return_value = False

    assert CartService(engine).check_stocks(ALICE) is False
    engine.check_stocks.assert_called_once_with(cart)


def test_checkout_and_clean(engine):
    engine.clean_expired_carts.return_value = 2
    svc = CartService(engine)

    svc.checkout(ALICE)
    svc.delete_cart(ALICE)

    engine.checkout.assert_called_once_with(1)
    engine.delete_cart.assert_called_once_with(1)
    assert svc.clean_expired_carts(timedelta(minutes=1)) == 2


def test_end_to_end_with_real_engine(session_factory, add_book, stock_of):
    b1 = add_book(stock=2)
    svc = CartService(CartEngine(session_factory))

    assert svc.update_cart(ALICE, [b1, b1]) == {"user_id": 1, "book_ids": [b1, b1]}
    assert svc.get_cart(ALICE) == {"user_id": 1, "book_ids": [b1, b1]}
    assert svc.check_stocks(ALICE) is False
    svc.checkout(ALICE)
    assert stock_of(b1) == 0
