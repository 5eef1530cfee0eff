# bookshop/repos/category_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshop.data.models.category import CategoryModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_categories(self) -> List[CategoryModel]:
        stmt = select(CategoryModel).order_by(CategoryModel.id)
        return list(self.db.execute(stmt).scalars().all())

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def update_category(self, category_id: int, name: str) -> CategoryModel | None:
        category = self.get_category(category_id)
        if category:
            category.name = name
            self.db.commit()
            self.db.refresh(category)
        return category

    def delete_category(self, category_id: int) -> bool:
        category = self.get_category(category_id)
        if not category:
            return False
        self.db.delete(category)
        self.db.commit()
        return True
