from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookshop.api.deps import get_bearer_token, get_current_user, get_token_service, http_error
from bookshop.data.database import get_db
from bookshop.domain.errors import BookshopError
from bookshop.domain.schemas import AuthIn, TokenOut, UserRead
from bookshop.services.token_service import TokenService
from bookshop.services.user_service import UserService

router = APIRouter(tags=["auth"])


def get_service(db: Session, tokens: TokenService):
    return UserService(db, tokens)


@router.post("/signup")
def sign_up(
    payload: AuthIn,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    svc = get_service(db, tokens)
    try:
        svc.sign_up(payload.username, payload.password)
    except BookshopError as e:
        raise http_error(e)
    return {"ok": True}


@router.post("/signin", response_model=TokenOut)
def sign_in(
    payload: AuthIn,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    svc = get_service(db, tokens)
    try:
        return TokenOut(token=svc.sign_in(payload.username, payload.password))
    except BookshopError as e:
        raise http_error(e)


@router.post("/signout")
def sign_out(
    user: UserRead = Depends(get_current_user),
    token: str = Depends(get_bearer_token),
    tokens: TokenService = Depends(get_token_service),
):
    tokens.revoke_token(token)
    return {"ok": True}
