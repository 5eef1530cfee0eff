#bookshop/data/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, DateTime, ARRAY, JSON

from bookshop.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class CartModel(Base):
    __tablename__ = "carts"

    #one cart per user, upserts conflict on this column
    user_id = Column(Integer, primary_key=True, autoincrement=False)

    #int[] on postgres, json list on sqlite
    book_ids = Column(ARRAY(Integer).with_variant(JSON(), "sqlite"), nullable=False, default=list)

    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
