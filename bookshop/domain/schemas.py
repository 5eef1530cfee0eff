# bookshop/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List


class AuthIn(BaseModel):
    """Schema dla rejestracji i logowania."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=200)


class TokenOut(BaseModel):
    token: str


class UserRead(BaseModel):
    """Resolved caller identity."""

    id: int
    username: str
    admin: bool = False

    model_config = ConfigDict(from_attributes=True)


class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class CategoryOut(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class BookIn(BaseModel):
    """Schema dla tworzenia i edycji ksiazki. Stock is ignored on update."""

    title: str = Field(..., min_length=1)
    year: int
    author: str = Field(..., min_length=1)
    price: int = Field(..., ge=0, description="Cena w groszach (minor units)")
    stock: int = Field(0, ge=0)
    category_id: int = Field(..., gt=0, alias="categoryId")

    model_config = ConfigDict(populate_by_name=True)


class BookOut(BaseModel):
    id: int
    title: str
    year: int
    author: str
    price: int
    stock: int
    category_id: int = Field(..., serialization_alias="categoryId")

    model_config = ConfigDict(from_attributes=True)


class CartIn(BaseModel):
    """Cart replaces the whole list: duplicates mean quantity."""

    book_ids: List[int] = Field(default_factory=list)


class CartOut(BaseModel):
    user_id: int
    book_ids: List[int]


class StockCheckOut(BaseModel):
    user_id: int
    sufficient: bool
