#bookshop/data/models/book.py
from sqlalchemy import Column, Integer, String, CheckConstraint

from bookshop.data.database import Base


class BookModel(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    author = Column(String, nullable=False)

    #minor currency units
    price = Column(Integer, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    category_id = Column(Integer, nullable=False, index=True)

    __table_args__ = (CheckConstraint("stock >= 0", name="books_stock_non_negative"),)
