# educk/services/enrollment_service.py
from sqlalchemy.orm import Session

from educk.data.models.order import OrderModel
from educk.repos.course_repo import CourseRepo
from educk.repos.user_repo import UserRepo
from educk.utils.logging import get_logger

logger = get_logger(__name__)


class EnrollmentService:
    """
    Grants course access for a settled order.

    Works inside the caller's transaction and never commits.
    """

    def __init__(self, db: Session):
        self.users = UserRepo(db)
        self.courses = CourseRepo(db)

    def grant_access(self, order: OrderModel) -> list[int]:
        """
        Enrolls the order's user in every course of the order they do not
        already own. Each new enrollment bumps the course's sales counter once.

        Returns ids of the newly granted courses; calling it again for the
        same order returns an empty list.
        """
        granted = []
        seen = set()

        for item in order.items:
            if item.course_id in seen:
                continue
            seen.add(item.course_id)

            if self.users.is_enrolled(order.user_id, item.course_id):
                logger.info(f"User {order.user_id} already enrolled in course {item.course_id}, skipping")
                continue

            self.users.add_enrollment(order.user_id, item.course_id, order_id=order.id)
            self.courses.increment_sales(item.course_id)
            granted.append(item.course_id)

        logger.info(f"Order {order.id}: granted {len(granted)} course(s) to user {order.user_id}")
        return granted
