# educk/repos/review_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import joinedload

from educk.data.models.review import ReviewModel
from educk.repos.base import BaseRepo


class ReviewRepo(BaseRepo):
    def get_review(self, review_id: int) -> ReviewModel | None:
        return self.db.get(ReviewModel, review_id)

    def get_user_review(self, user_id: int, course_id: int) -> ReviewModel | None:
        return self.db.execute(
            select(ReviewModel).where(
                ReviewModel.user_id == user_id,
                ReviewModel.course_id == course_id,
            )
        ).scalar_one_or_none()

    def save(self, review: ReviewModel) -> ReviewModel:
        self.db.add(review)
        self.commit()
        self.db.refresh(review)
        return review

    def delete(self, review: ReviewModel) -> None:
        self.db.delete(review)
        self.commit()

    def list_reviews(
        self,
        course_id: int | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[ReviewModel], int]:
        query = select(ReviewModel)
        if course_id is not None:
            query = query.where(ReviewModel.course_id == course_id)

        total = self.db.execute(
            select(func.count()).select_from(query.subquery())
        ).scalar_one()

        reviews = self.db.execute(
            query.options(joinedload(ReviewModel.user), joinedload(ReviewModel.course))
            .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars().all()

        return list(reviews), total

    def rating_summaries(self, course_ids: list[int]) -> dict[int, tuple[float, int]]:
        """course id -> (average rating, review count), for courses that have reviews."""
        if not course_ids:
            return {}

        rows = self.db.execute(
            select(ReviewModel.course_id, func.avg(ReviewModel.rating), func.count(ReviewModel.id))
            .where(ReviewModel.course_id.in_(course_ids))
            .group_by(ReviewModel.course_id)
        ).all()

        return {course_id: (float(avg), count) for course_id, avg, count in rows}

    def rating_summary(self, course_id: int) -> tuple[float, int]:
        return self.rating_summaries([course_id]).get(course_id, (0.0, 0))
