# educk/services/review_service.py
import math
from typing import Any, Dict

from sqlalchemy.orm import Session

from educk.data.models.review import ReviewModel
from educk.domain.errors import ForbiddenError, NotFoundError, ReviewAlreadyExistsError
from educk.domain.schemas import ReviewIn, ReviewUpdate
from educk.repos.course_repo import CourseRepo
from educk.repos.review_repo import ReviewRepo
from educk.repos.user_repo import UserRepo
from educk.utils.logging import get_logger

logger = get_logger(__name__)


def review_to_dict(review: ReviewModel) -> Dict[str, Any]:
    return {
        "id": review.id,
        "course_id": review.course_id,
        "course_title": review.course.title,
        "user": {"id": review.user.id, "name": review.user.name},
        "rating": review.rating,
        "comment": review.comment,
        "created_at": review.created_at,
    }


class ReviewService:
    """
    Course reviews. Only enrolled users may review, once per course; the
    author or an admin may edit or delete a review.
    """

    def __init__(self, db: Session):
        self.repo = ReviewRepo(db)
        self.courses = CourseRepo(db)
        self.users = UserRepo(db)

    def _get(self, review_id: int) -> ReviewModel:
        review = self.repo.get_review(review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    @staticmethod
    def _check_author(review: ReviewModel, user_id: int, is_admin: bool):
        if review.user_id != user_id and not is_admin:
            raise ForbiddenError("Only the author can change this review")

    # queries
    def list_course_reviews(self, course_id: int, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        if not self.courses.get_course(course_id):
            raise NotFoundError("Course not found")

        reviews, total = self.repo.list_reviews(course_id=course_id, offset=(page - 1) * limit, limit=limit)
        average, count = self.repo.rating_summary(course_id)

        return {
            "reviews": [review_to_dict(r) for r in reviews],
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": math.ceil(total / limit),
            },
            "average_rating": round(average, 2),
            "total_reviews": count,
        }

    def list_reviews(self, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        reviews, total = self.repo.list_reviews(offset=(page - 1) * limit, limit=limit)
        return {
            "reviews": [review_to_dict(r) for r in reviews],
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": math.ceil(total / limit),
            },
        }

    # commands
    def add_review(self, user_id: int, payload: ReviewIn) -> Dict[str, Any]:
        if not self.courses.get_course(payload.course_id):
            raise NotFoundError("Course not found")

        if not self.users.is_enrolled(user_id, payload.course_id):
            raise ForbiddenError("You must be enrolled in this course to review it")

        if self.repo.get_user_review(user_id, payload.course_id):
            raise ReviewAlreadyExistsError()

        review = self.repo.save(
            ReviewModel(
                course_id=payload.course_id,
                user_id=user_id,
                rating=payload.rating,
                comment=payload.comment,
            )
        )
        logger.info(f"User {user_id} reviewed course {payload.course_id}: {payload.rating}/5")
        return review_to_dict(review)

    def update_review(self, review_id: int, user_id: int, payload: ReviewUpdate, is_admin: bool = False) -> Dict[str, Any]:
        review = self._get(review_id)
        self._check_author(review, user_id, is_admin)

        review.rating = payload.rating
        review.comment = payload.comment

        return review_to_dict(self.repo.save(review))

    def delete_review(self, review_id: int, user_id: int, is_admin: bool = False) -> None:
        review = self._get(review_id)
        self._check_author(review, user_id, is_admin)

        self.repo.delete(review)
        logger.info(f"Review {review_id} deleted by user {user_id}")
