# educk/services/category_service.py
import re
import unicodedata
from typing import Any, Dict

from sqlalchemy.orm import Session

from educk.data.models.category import CategoryModel
from educk.domain.errors import CategoryAlreadyExistsError, EduckError, NotFoundError
from educk.domain.schemas import CategoryCreate, CategoryOut, CategoryUpdate
from educk.repos.category_repo import CategoryRepo
from educk.repos.course_repo import CourseRepo
from educk.services.course_service import CourseService
from educk.utils.logging import get_logger

logger = get_logger(__name__)


def slugify(name: str) -> str:
    """'Ciência de Dados' -> 'ciencia-de-dados'"""
    text = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


class CategoryService:
    """
    Course categories.
    Courses point at a category by slug, so renaming a category moves its
    courses along in the same transaction.
    """

    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)
        self.courses = CourseRepo(db)
        self.course_service = CourseService(db)

    def _get(self, category_id: int) -> CategoryModel:
        category = self.repo.get_category(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def _slug_for(self, name: str, current: CategoryModel | None = None) -> str:
        slug = slugify(name)
        if not slug:
            raise EduckError("Category name must contain letters or digits")

        existing = self.repo.get_by_slug(slug)
        if existing and existing is not current:
            raise CategoryAlreadyExistsError()
        return slug

    def _check_parent(self, parent_id: int | None, current: CategoryModel | None = None):
        if parent_id is None:
            return
        if current is not None and parent_id == current.id:
            raise EduckError("A category cannot be its own parent")
        if not self.repo.get_category(parent_id):
            raise NotFoundError("Parent category not found")

    # queries
    def list_categories(self) -> list[CategoryOut]:
        return [CategoryOut.model_validate(c) for c in self.repo.list_active()]

    def get_category(self, category_id: int) -> CategoryOut:
        return CategoryOut.model_validate(self._get(category_id))

    def list_courses(self, category_id: int, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        category = self._get(category_id)
        return self.course_service.list_published(category=category.slug, page=page, limit=limit)

    # commands
    def create_category(self, payload: CategoryCreate) -> CategoryOut:
        slug = self._slug_for(payload.name)
        self._check_parent(payload.parent_id)

        category = CategoryModel(
            name=payload.name.strip(),
            slug=slug,
            description=payload.description,
            icon=payload.icon,
            color=payload.color,
            parent_id=payload.parent_id,
            position=payload.position,
            is_active=True,
        )
        created = self.repo.save(category)
        logger.info(f"Category {created.id} created: {created.slug}")
        return CategoryOut.model_validate(created)

    def update_category(self, category_id: int, payload: CategoryUpdate) -> CategoryOut:
        category = self._get(category_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        if "parent_id" in changes:
            self._check_parent(changes["parent_id"], current=category)

        if "name" in changes:
            slug = self._slug_for(changes["name"], current=category)
            if slug != category.slug:
                moved = self.courses.rename_category(category.slug, slug)
                logger.info(f"Category {category_id} renamed {category.slug} -> {slug}, {moved} course(s) moved")
            category.name = changes.pop("name").strip()
            category.slug = slug

        for field, value in changes.items():
            setattr(category, field, value)

        saved = self.repo.save(category)
        return CategoryOut.model_validate(saved)

    def delete_category(self, category_id: int) -> tuple[str, CategoryOut | None]:
        """Deletes an unused category; one that still has courses is only deactivated."""
        category = self._get(category_id)

        if self.courses.count_in_category(category.slug) > 0:
            category.is_active = False
            saved = self.repo.save(category)
            logger.info(f"Category {category_id} deactivated, it still has courses")
            return "Category deactivated because it still has courses", CategoryOut.model_validate(saved)

        self.repo.delete(category)
        logger.info(f"Category {category_id} deleted")
        return "Category deleted", None
