# storefront/services/notification_service.py
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.data.models.outbox import OutboxMessageModel
from storefront.domain.status import OutboxStatus
from storefront.repos.outbox_repo import OutboxRepo
from storefront.services.mail_client import MailClient
from storefront.services.mail_templates import ORDER_CONFIRMATION, LOW_STOCK, render
from storefront.utils.settings import (
    ADMIN_EMAILS,
    LOW_STOCK_THRESHOLD,
    OUTBOX_BATCH_SIZE,
    OUTBOX_CLAIM_TIMEOUT_SECONDS,
    OUTBOX_MAX_ATTEMPTS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Notifications go through the outbox table: rows are written inside the
    caller's transaction and delivered later by dispatch_outbox_task.
    """

    def __init__(self, db: Session):
        self.repo = OutboxRepo(db)

    def enqueue(self, topic: str, payload: dict) -> OutboxMessageModel:
        return self.repo.add(
            OutboxMessageModel(topic=topic, payload=payload, status=OutboxStatus.PENDING.value, attempts=0)
        )

    def enqueue_order_confirmation(self, order, user, address, lines, summary) -> OutboxMessageModel:
        """lines: (product_id, name, quantity, price) captured before the cart was cleared."""
        payload = {
            "order_id": order.id,
            "order_number": order.order_number,
            "customer_name": user.name if user else "",
            "customer_email": user.email if user else "",
            "items": [
                {"product_id": pid, "name": name, "quantity": qty, "price": str(price)}
                for pid, name, qty, price in lines
            ],
            "subtotal": str(summary.subtotal),
            "shipping_cost": str(summary.shipping_cost),
            "tax_amount": str(summary.tax_amount),
            "total_amount": str(summary.total_amount),
            "shipping_address": {
                "name": address.name,
                "address1": address.address1,
                "address2": address.address2,
                "city": address.city,
                "state": address.state,
                "zip_code": address.zip_code,
            },
            "order_date": order.created_at.isoformat(),
        }
        return self.enqueue(ORDER_CONFIRMATION, payload)

    def enqueue_low_stock(self, product, threshold: int = LOW_STOCK_THRESHOLD) -> OutboxMessageModel:
        return self.enqueue(
            LOW_STOCK,
            {
                "product_id": product.id,
                "name": product.name,
                "sku": product.sku,
                "current_stock": product.stock,
                "threshold": threshold,
                "recipients": list(ADMIN_EMAILS),
            },
        )

    @staticmethod
    def schedule_dispatch():
        """
        Kick the dispatcher right after a commit. Best effort: the beat
        schedule picks the rows up anyway if the broker is unreachable.
        """
        try:
            dispatch_outbox_task.delay()
        except Exception as e:
            logger.warning(f"Could not schedule outbox dispatch: {e}")


def dispatch_outbox(
    db: Session,
    mailer,
    limit: int = OUTBOX_BATCH_SIZE,
    max_attempts: int = OUTBOX_MAX_ATTEMPTS,
    claim_timeout: int = OUTBOX_CLAIM_TIMEOUT_SECONDS,
) -> dict:
    """
    Deliver pending outbox rows.

    Each row is claimed (PENDING -> SENDING) and committed before the mail
    goes out, so two dispatchers never send the same row. A failed delivery
    puts the row back to PENDING, or parks it as FAILED after max_attempts.
    A worker that dies mid-send leaves a SENDING row behind; it becomes
    claimable again after claim_timeout seconds.
    Delivery errors are logged, never raised.
    """
    repo = OutboxRepo(db)
    sent = failed = 0
    stale_before = datetime.now(timezone.utc) - timedelta(seconds=claim_timeout)

    for message_id in repo.list_claimable_ids(limit, stale_before):
        if not repo.claim(message_id, datetime.now(timezone.utc), stale_before):
            db.rollback()
            logger.info(f"[OUTBOX] Message {message_id} already claimed, skipping")
            continue
        db.commit()

        message = repo.get(message_id)
        try:
            mail = render(message.topic, message.payload)
            mailer.send(mail.to, mail.subject, mail.body)
        except Exception as e:
            message.last_error = str(e)[:500]
            message.claimed_at = None
            if message.attempts >= max_attempts:
                message.status = OutboxStatus.FAILED.value
                failed += 1
            else:
                message.status = OutboxStatus.PENDING.value
            logger.warning(
                f"[OUTBOX] Delivery of message {message.id} ({message.topic}) failed "
                f"on attempt {message.attempts}: {e}"
            )
        else:
            message.status = OutboxStatus.SENT.value
            message.sent_at = datetime.now(timezone.utc)
            message.last_error = None
            sent += 1
            logger.info(f"[OUTBOX] Message {message.id} ({message.topic}) sent")
        db.commit()

    return {"sent": sent, "failed": failed}


@celery_app.task(name="storefront.services.notification_service.dispatch_outbox_task")
def dispatch_outbox_task():
    db = SessionLocal()
    try:
        return dispatch_outbox(db, MailClient())
    finally:
        db.close()
