#bookshop/api/routers/carts.py
from fastapi import APIRouter, Depends

from bookshop.api.deps import get_current_user, get_session_factory, http_error
from bookshop.domain.errors import BookshopError
from bookshop.domain.schemas import CartIn, CartOut, StockCheckOut, UserRead
from bookshop.services.cart_engine import CartEngine
from bookshop.services.cart_service import CartService

router = APIRouter(tags=["cart"])


def get_service(session_factory=Depends(get_session_factory)):
    return CartService(CartEngine(session_factory))


@router.post("/cart", response_model=CartOut)
def update_cart(
    payload: CartIn,
    user: UserRead = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.update_cart(user, payload.book_ids)
    except BookshopError as e:
        raise http_error(e)


@router.get("/cart", response_model=CartOut)
def get_cart(
    user: UserRead = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.get_cart(user)
    except BookshopError as e:
        raise http_error(e)


@router.get("/cart/stock", response_model=StockCheckOut)
def check_stocks(
    user: UserRead = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return StockCheckOut(user_id=user.id, sufficient=svc.check_stocks(user))
    except BookshopError as e:
        raise http_error(e)


@router.delete("/cart")
def delete_cart(
    user: UserRead = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        svc.delete_cart(user)
    except BookshopError as e:
        raise http_error(e)
    return {"deleted": True}


@router.post("/checkout")
def checkout(
    user: UserRead = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        svc.checkout(user)
    except BookshopError as e:
        raise http_error(e)
    return {"ok": True}
