# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    OUTBOX_DISPATCH_INTERVAL,
)

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks are registered on import of these modules
celery_app.conf.imports = (
    "storefront.services.notification_service",
)

# the outbox is also drained on a schedule, so a lost kick only delays delivery
celery_app.conf.beat_schedule = {
    "dispatch-outbox": {
        "task": "storefront.services.notification_service.dispatch_outbox_task",
        "schedule": OUTBOX_DISPATCH_INTERVAL,
    },
}

celery_app.conf.timezone = "UTC"
