# educk/repos/category_repo.py
from sqlalchemy import select

from educk.data.models.category import CategoryModel
from educk.repos.base import BaseRepo


class CategoryRepo(BaseRepo):
    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    def list_active(self) -> list[CategoryModel]:
        return list(
            self.db.execute(
                select(CategoryModel)
                .where(CategoryModel.is_active.is_(True))
                .order_by(CategoryModel.position, CategoryModel.name)
            ).scalars()
        )

    def save(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.commit()
        self.db.refresh(category)
        return category

    def delete(self, category: CategoryModel) -> None:
        self.db.delete(category)
        self.commit()
