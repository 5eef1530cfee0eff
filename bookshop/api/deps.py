# bookshop/api/deps.py
from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from bookshop.data.database import SessionLocal
from bookshop.domain.errors import (
    AlreadyExists,
    BookshopError,
    InvalidInput,
    InvalidToken,
    NotEnoughStock,
    NotFound,
    TransactionFailure,
)
from bookshop.domain.schemas import UserRead
from bookshop.services.token_service import TokenService
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


@lru_cache
def get_token_service() -> TokenService:
    return TokenService()


def get_session_factory():
    return SessionLocal


def http_error(e: Exception) -> HTTPException:
    """Maps domain errors to responses. Storage details never reach the client."""
    if isinstance(e, TransactionFailure):
        logger.error(f"Internal failure: {e}")
        return HTTPException(status_code=500, detail="internal error")
    if isinstance(e, InvalidInput):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, InvalidToken):
        return HTTPException(status_code=401, detail=str(e))
    if isinstance(e, PermissionError):
        return HTTPException(status_code=403, detail=str(e))
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (NotEnoughStock, AlreadyExists)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, BookshopError):
        return HTTPException(status_code=400, detail=str(e))
    logger.error(f"Unexpected error: {e}")
    return HTTPException(status_code=500, detail="internal error")


def get_bearer_token(authorization: str = Header(default="")) -> str:
    return authorization.removeprefix(BEARER_PREFIX).strip()


def get_current_user(
    token: str = Depends(get_bearer_token),
    tokens: TokenService = Depends(get_token_service),
) -> UserRead:
    try:
        user = tokens.get_user(token)
    except InvalidToken as e:
        raise http_error(e)
    if user.id <= 0 or not user.username:
        raise HTTPException(status_code=401, detail="invalid token")
    return user


def require_admin(user: UserRead = Depends(get_current_user)) -> UserRead:
    if not user.admin:
        raise http_error(PermissionError("not admin"))
    return user
