from typing import List

from sqlalchemy.orm import Session

from bookshop.data.models.category import CategoryModel
from bookshop.domain.book import Category
from bookshop.domain.errors import NotFound
from bookshop.domain.schemas import CategoryOut
from bookshop.repos.category_repo import CategoryRepo


class CategoryService:
    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)

    def get_category(self, category_id: int) -> CategoryOut:
        category = self.repo.get_category(category_id)
        if not category:
            raise NotFound(f"category {category_id} not found")
        return CategoryOut.model_validate(category)

    def get_categories(self) -> List[CategoryOut]:
        return [CategoryOut.model_validate(c) for c in self.repo.get_categories()]

    def create_category(self, name: str) -> CategoryOut:
        category = Category(name=name)
        created = self.repo.create_category(CategoryModel(name=category.name))
        return CategoryOut.model_validate(created)

    def update_category(self, category_id: int, name: str) -> CategoryOut:
        category = Category(id=category_id, name=name)
        updated = self.repo.update_category(category_id, category.name)
        if not updated:
            raise NotFound(f"category {category_id} not found")
        return CategoryOut.model_validate(updated)

    def delete_category(self, category_id: int) -> None:
        if not self.repo.delete_category(category_id):
            raise NotFound(f"category {category_id} not found")
