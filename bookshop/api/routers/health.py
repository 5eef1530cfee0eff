from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from bookshop.data.database import get_db

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
def root():
    return "Book Shop API v0.1"


@router.get("/health")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok"}
