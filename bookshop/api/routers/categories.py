from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookshop.api.deps import http_error, require_admin
from bookshop.data.database import get_db
from bookshop.domain.errors import BookshopError
from bookshop.domain.schemas import CategoryIn, CategoryOut
from bookshop.services.category_service import CategoryService

router = APIRouter(tags=["categories"])


def get_service(db: Session):
    return CategoryService(db)


@router.get("/categories", response_model=List[CategoryOut])
def get_categories(db: Session = Depends(get_db)):
    return get_service(db).get_categories()


@router.get("/category/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    try:
        return get_service(db).get_category(category_id)
    except BookshopError as e:
        raise http_error(e)


@router.post("/category", response_model=CategoryOut, dependencies=[Depends(require_admin)])
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    try:
        return get_service(db).create_category(payload.name)
    except BookshopError as e:
        raise http_error(e)


@router.patch("/category/{category_id}", response_model=CategoryOut, dependencies=[Depends(require_admin)])
def update_category(category_id: int, payload: CategoryIn, db: Session = Depends(get_db)):
    try:
        return get_service(db).update_category(category_id, payload.name)
    except BookshopError as e:
        raise http_error(e)


@router.delete("/category/{category_id}", dependencies=[Depends(require_admin)])
def delete_category(category_id: int, db: Session = Depends(get_db)):
    try:
        get_service(db).delete_category(category_id)
    except BookshopError as e:
        raise http_error(e)
    return {"deleted": True}
