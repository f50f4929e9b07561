# educk/repos/course_repo.py
from sqlalchemy import select, update, func, or_

from educk.data.models.course import CourseModel
from educk.data.models.enrollment import EnrollmentModel
from educk.repos.base import BaseRepo


class CourseRepo(BaseRepo):
    def get_course(self, course_id: int) -> CourseModel | None:
        return self.db.get(CourseModel, course_id)

    def create_course(self, course: CourseModel) -> CourseModel:
        self.db.add(course)
        self.commit()
        self.db.refresh(course)
        return course

    def save(self, course: CourseModel) -> CourseModel:
        self.db.add(course)
        self.commit()
        self.db.refresh(course)
        return course

    def list_published(
        self,
        category: str | None = None,
        level: str | None = None,
        search: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[CourseModel], int]:
        query = select(CourseModel).where(CourseModel.is_published.is_(True))

        if category:
            query = query.where(CourseModel.category == category)
        if level:
            query = query.where(CourseModel.level == level)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    CourseModel.title.ilike(pattern),
                    CourseModel.short_description.ilike(pattern),
                )
            )

        total = self.db.execute(
            select(func.count()).select_from(query.subquery())
        ).scalar_one()

        courses = self.db.execute(
            query.order_by(CourseModel.published_at.desc(), CourseModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars().all()

        return list(courses), total

    def count_students(self, course_id: int) -> int:
        return self.db.execute(
            select(func.count(EnrollmentModel.id)).where(EnrollmentModel.course_id == course_id)
        ).scalar_one()

    def increment_sales(self, course_id: int) -> None:
        # single SQL UPDATE, no read-modify-write in Python
        self.db.execute(
            update(CourseModel)
            .where(CourseModel.id == course_id)
            .values(sales_count=CourseModel.sales_count + 1)
        )

    def list_by_instructor(self, instructor_id: int) -> list[CourseModel]:
        return list(
            self.db.execute(
                select(CourseModel)
                .where(CourseModel.instructor_id == instructor_id)
                .order_by(CourseModel.created_at.desc(), CourseModel.id.desc())
            ).scalars()
        )

    def student_counts(self, course_ids: list[int]) -> dict[int, int]:
        if not course_ids:
            return {}
        rows = self.db.execute(
            select(EnrollmentModel.course_id, func.count(EnrollmentModel.id))
            .where(EnrollmentModel.course_id.in_(course_ids))
            .group_by(EnrollmentModel.course_id)
        ).all()
        return {course_id: count for course_id, count in rows}

    def count_in_category(self, slug: str) -> int:
        return self.db.execute(
            select(func.count(CourseModel.id)).where(CourseModel.category == slug)
        ).scalar_one()

    def rename_category(self, old_slug: str, new_slug: str) -> int:
        """Moves every course from one category slug to another. Does not commit."""
        result = self.db.execute(
            update(CourseModel)
            .where(CourseModel.category == old_slug)
            .values(category=new_slug)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
