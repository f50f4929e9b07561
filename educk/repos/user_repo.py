# educk/repos/user_repo.py
from sqlalchemy import select, update, exists

from educk.data.models.user import UserModel
from educk.data.models.course import CourseModel
from educk.data.models.enrollment import EnrollmentModel
from educk.data.models.notification import NotificationModel
from educk.repos.base import BaseRepo


class UserRepo(BaseRepo):
    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_user_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.commit()
        self.db.refresh(user)
        return user

    # ----- enrollments -----
    def is_enrolled(self, user_id: int, course_id: int) -> bool:
        return self.db.execute(
            select(
                exists().where(
                    EnrollmentModel.user_id == user_id,
                    EnrollmentModel.course_id == course_id,
                )
            )
        ).scalar()

    def add_enrollment(self, user_id: int, course_id: int, order_id: int | None = None) -> EnrollmentModel:
        enrollment = EnrollmentModel(user_id=user_id, course_id=course_id, order_id=order_id)
        self.db.add(enrollment)
        self.flush()
        return enrollment

    def get_enrolled_courses(self, user_id: int) -> list[CourseModel]:
        return list(
            self.db.execute(
                select(CourseModel)
                .join(EnrollmentModel, EnrollmentModel.course_id == CourseModel.id)
                .where(EnrollmentModel.user_id == user_id)
                .order_by(EnrollmentModel.enrolled_at.desc(), EnrollmentModel.id.desc())
            ).scalars()
        )

    # ----- notifications -----
    def add_notification(self, user_id: int, message: str) -> NotificationModel:
        notification = NotificationModel(user_id=user_id, message=message)
        self.db.add(notification)
        self.commit()
        return notification

    def get_notifications(self, user_id: int) -> list[NotificationModel]:
        return list(
            self.db.execute(
                select(NotificationModel)
                .where(NotificationModel.user_id == user_id)
                .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            ).scalars()
        )

    def mark_notifications_read(self, user_id: int) -> int:
        result = self.db.execute(
            update(NotificationModel)
            .where(NotificationModel.user_id == user_id, NotificationModel.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        self.commit()
        return result.rowcount
