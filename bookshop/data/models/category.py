from sqlalchemy import Column, Integer, String
from bookshop.data.database import Base

class CategoryModel(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
