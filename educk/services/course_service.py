# educk/services/course_service.py
import math
from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.orm import Session

from educk.data.models.course import CourseModel
from educk.domain.enums import CourseStatus, COURSE_STATUS_TRANSITIONS, check_transition
from educk.domain.errors import ForbiddenError, NotFoundError, EduckError
from educk.domain.pricing import PriceLine
from educk.domain.schemas import CourseCreate, CourseUpdate
from educk.repos.course_repo import CourseRepo
from educk.repos.review_repo import ReviewRepo
from educk.repos.user_repo import UserRepo
from educk.utils.logging import get_logger

logger = get_logger(__name__)


def _plain(data: dict) -> dict:
    return {k: v.value if isinstance(v, Enum) else v for k, v in data.items()}


class CourseService:
    def __init__(self, db: Session):
        self.repo = CourseRepo(db)
        self.users = UserRepo(db)
        self.reviews = ReviewRepo(db)

    def _to_dict(self, course: CourseModel) -> Dict[str, Any]:
        line = PriceLine.from_course(course)
        average_rating, total_reviews = self.reviews.rating_summary(course.id)
        return {
            "id": course.id,
            "title": course.title,
            "short_description": course.short_description,
            "description": course.description,
            "category": course.category,
            "level": course.level,
            "language": course.language,
            "instructor_id": course.instructor_id,
            "instructor_name": course.instructor.name,
            "price": line.price,
            "discount_price": line.discount_price,
            "final_price": line.final_price,
            "status": course.status,
            "is_published": course.is_published,
            "published_at": course.published_at,
            "sales_count": course.sales_count,
            "student_count": self.repo.count_students(course.id),
            "average_rating": round(average_rating, 2),
            "total_reviews": total_reviews,
            "created_at": course.created_at,
        }

    def _get(self, course_id: int) -> CourseModel:
        course = self.repo.get_course(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    def _check_owner(self, course: CourseModel, user_id: int, is_admin: bool):
        if course.instructor_id != user_id and not is_admin:
            raise ForbiddenError("Only the course instructor can change this course")

    # queries
    def list_published(
        self,
        category: str | None = None,
        level: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> Dict[str, Any]:
        courses, total = self.repo.list_published(
            category=category,
            level=level,
            search=search,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return {
            "courses": [self._to_dict(c) for c in courses],
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": math.ceil(total / limit),
            },
        }

    def get_course(self, course_id: int) -> Dict[str, Any]:
        return self._to_dict(self._get(course_id))

    def list_enrolled(self, user_id: int) -> list[Dict[str, Any]]:
        return [self._to_dict(c) for c in self.users.get_enrolled_courses(user_id)]

    # commands
    def create_course(self, instructor_id: int, payload: CourseCreate) -> Dict[str, Any]:
        course = CourseModel(
            instructor_id=instructor_id,
            status=CourseStatus.DRAFT.value,
            is_published=False,
            sales_count=0,
            **_plain(payload.model_dump()),
        )
        created = self.repo.create_course(course)
        logger.info(f"Course {created.id} created by instructor {instructor_id}")
        return self._to_dict(created)

    def update_course(self, course_id: int, user_id: int, payload: CourseUpdate, is_admin: bool = False) -> Dict[str, Any]:
        """Edits a course. Orders keep the prices they were placed with."""
        course = self._get(course_id)
        self._check_owner(course, user_id, is_admin)

        changes = _plain(payload.model_dump(exclude_unset=True, exclude_none=True))
        price = changes.get("price", course.price)
        discount_price = changes.get("discount_price", course.discount_price)
        if discount_price > price:
            raise EduckError("discountPrice cannot exceed price")

        for field, value in changes.items():
            setattr(course, field, value)

        saved = self.repo.save(course)
        logger.info(f"Course {course_id} updated by user {user_id}: {sorted(changes)}")
        return self._to_dict(saved)

    def submit_for_review(self, course_id: int, user_id: int, is_admin: bool = False) -> Dict[str, Any]:
        course = self._get(course_id)
        self._check_owner(course, user_id, is_admin)

        check_transition(COURSE_STATUS_TRANSITIONS, CourseStatus(course.status), CourseStatus.PENDING)
        course.status = CourseStatus.PENDING.value

        return self._to_dict(self.repo.save(course))

    def moderate(self, course_id: int, status: CourseStatus) -> Dict[str, Any]:
        """Admin moderation: publish or reject a course."""
        course = self._get(course_id)

        if check_transition(COURSE_STATUS_TRANSITIONS, CourseStatus(course.status), status):
            course.status = status.value
            course.is_published = status == CourseStatus.PUBLISHED
            if course.is_published:
                course.published_at = datetime.now(timezone.utc)

        saved = self.repo.save(course)
        logger.info(f"Course {course_id} moderated: {saved.status}")
        return self._to_dict(saved)
