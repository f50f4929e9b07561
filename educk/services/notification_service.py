# educk/services/notification_service.py
from educk.celery_worker import celery_app
from educk.data.database import SessionLocal
from educk.repos.user_repo import UserRepo
from educk.utils.logging import get_logger

logger = get_logger(__name__)


def enrollment_message(order_id: int, course_titles: list[str]) -> str:
    titles = ", ".join(course_titles)
    return f"Payment for order #{order_id} confirmed. You now have access to: {titles}"


class NotificationService:
    """
    Queues in-app notifications.
    Celery does the write so the request does not wait for it.
    """

    @staticmethod
    def send_enrollment_notification(user_id: int, order_id: int, course_titles: list[str]):
        send_enrollment_notification_task.delay(user_id, order_id, course_titles)


@celery_app.task(name="educk.services.notification_service.send_enrollment_notification_task")
def send_enrollment_notification_task(user_id: int, order_id: int, course_titles: list[str]):
    """Stores the notification in the user's inbox. Delivery to devices is handled elsewhere."""
    db = SessionLocal()
    try:
        UserRepo(db).add_notification(user_id, enrollment_message(order_id, course_titles))
    finally:
        db.close()

    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} settled, {len(course_titles)} course(s) unlocked")

    return {"user_id": user_id, "order_id": order_id, "status": "stored"}


def get_notification_service() -> NotificationService:
    return NotificationService()
