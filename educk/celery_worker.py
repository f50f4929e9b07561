# educk/celery_worker.py
from celery import Celery

from educk.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "educk",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# register tasks explicitly
celery_app.conf.imports = (
    "educk.services.notification_service",
)

celery_app.conf.timezone = "UTC"
