# bookshop/api/routers/books.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookshop.api.deps import http_error, require_admin
from bookshop.data.database import get_db
from bookshop.domain.errors import BookshopError
from bookshop.domain.schemas import BookIn, BookOut
from bookshop.services.book_service import BookService

router = APIRouter(tags=["books"])


def get_service(db: Session):
    return BookService(db)


@router.get("/books", response_model=List[BookOut])
def get_books(
    category_id: List[int] = Query(default=[]),
    page: int = Query(1),
    db: Session = Depends(get_db),
):
    return get_service(db).get_books(category_id, page)


@router.get("/book/{book_id}", response_model=BookOut)
def get_book(book_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_book(book_id)
    except BookshopError as e:
        raise http_error(e)


@router.post("/book", response_model=BookOut, dependencies=[Depends(require_admin)])
def create_book(payload: BookIn, db: Session = Depends(get_db)):
    try:
        return get_service(db).create_book(payload)
    except BookshopError as e:
        raise http_error(e)


@router.patch("/book/{book_id}", response_model=BookOut, dependencies=[Depends(require_admin)])
def update_book(book_id: int, payload: BookIn, db: Session = Depends(get_db)):
    try:
        return get_service(db).update_book(book_id, payload)
    except BookshopError as e:
        raise http_error(e)


@router.delete("/book/{book_id}", dependencies=[Depends(require_admin)])
def delete_book(book_id: int, db: Session = Depends(get_db)):
    try:
        get_service(db).delete_book(book_id)
    except BookshopError as e:
        raise http_error(e)
    return {"deleted": True}
