"""Tests for outbox delivery of notifications."""

from datetime import datetime, timedelta, timezone

import pytest
import requests
from sqlalchemy import select

from storefront.data.database import SessionLocal
from storefront.data.models import OutboxMessageModel
from storefront.repos.outbox_repo import OutboxRepo
from storefront.services.mail_templates import LOW_STOCK, ORDER_CONFIRMATION, render
from storefront.services.notification_service import NotificationService, dispatch_outbox
from storefront.services.order_service import OrderService


@pytest.fixture
def placed_order(db, make_user, make_address, make_product, fill_cart):
    make_user(user_id=1, name="Hanako", email="hanako@example.com")
    address = make_address(user_id=1)
    fill_cart(1, (make_product(price=1000, name="Mug", stock=100), 2))
    return OrderService(db).create_order(1, address.id)


def _messages(db):
    return db.execute(select(OutboxMessageModel).order_by(OutboxMessageModel.id)).scalars().all()


class TestDispatch:
    def test_delivers_order_confirmation(self, db, placed_order, mailer):
        result = dispatch_outbox(db, mailer)

        assert result == {"sent": 1, "failed": 0}
        [mail] = mailer.sent
        assert mail["to"] == ["hanako@example.com"]
        assert placed_order.order_number in mail["subject"]
        assert "Mug x 2" in mail["body"]

        [message] = _messages(db)
        assert message.status == "SENT"
        assert message.attempts == 1
        assert message.sent_at is not None

    def test_sent_messages_are_not_resent(self, db, placed_order, mailer):
        dispatch_outbox(db, mailer)
        dispatch_outbox(db, mailer)
        assert len(mailer.sent) == 1

    def test_failure_keeps_message_pending(self, db, placed_order, failing_mailer):
        failing = failing_mailer(requests.ConnectionError("relay down"))

        result = dispatch_outbox(db, failing, max_attempts=3)

        assert result == {"sent": 0, "failed": 0}
        [message] = _messages(db)
        assert message.status == "PENDING"
        assert message.attempts == 1
        assert "relay down" in message.last_error

    def test_parked_after_max_attempts(self, db, placed_order, failing_mailer):
        failing = failing_mailer(requests.ConnectionError("relay down"))

        for _ in range(3):
            dispatch_outbox(db, failing, max_attempts=3)

        [message] = _messages(db)
        assert message.status == "FAILED"
        assert message.attempts == 3

    def test_order_survives_delivery_failure(self, db, placed_order, failing_mailer):
        dispatch_outbox(db, failing_mailer(RuntimeError("boom")))
        db.refresh(placed_order)
        assert placed_order.status == "PENDING"

    def test_unknown_topic_counts_as_failure(self, db, mailer):
        NotificationService(db).enqueue("something.else", {})
        db.commit()

        dispatch_outbox(db, mailer, max_attempts=1)

        [message] = _messages(db)
        assert message.status == "FAILED"
        assert mailer.sent == []

    def test_batch_limit(self, db, mailer):
        svc = NotificationService(db)
        for i in range(3):
            svc.enqueue(LOW_STOCK, {"name": f"P{i}", "sku": f"S{i}", "current_stock": 1, "threshold": 10, "recipients": ["ops@example.com"]})
        db.commit()

        assert dispatch_outbox(db, mailer, limit=2)["sent"] == 2
        assert dispatch_outbox(db, mailer, limit=2)["sent"] == 1


class TestTemplates:
    def test_out_of_stock_subject(self):
        mail = render(LOW_STOCK, {"name": "Mug", "sku": "MG-1", "current_stock": 0, "threshold": 10, "recipients": ["a@x"]})
        assert mail.subject.startswith("Out of stock")
        assert mail.to == ["a@x"]

    def test_confirmation_lists_totals(self):
        mail = render(
            ORDER_CONFIRMATION,
            {
                "order_number": "EC2610190001",
                "customer_name": "Hanako",
                "customer_email": "h@example.com",
                "items": [{"name": "Mug", "quantity": 1, "price": "1000"}],
                "subtotal": "1000",
                "shipping_cost": "500",
                "tax_amount": "100",
                "total_amount": "1600",
                "shipping_address": {
                    "name": "Hanako",
                    "address1": "1-2-3",
                    "address2": "Room 4",
                    "city": "Shibuya-ku",
                    "state": "Tokyo",
                    "zip_code": "150-0002",
                },
            },
        )
        assert "Total: 1600" in mail.body
        assert "Room 4" in mail.body

    def test_unknown_topic(self):
        with pytest.raises(ValueError):
            render("nope", {})


class TestCeleryEntryPoints:
    def test_task_drains_outbox(self, db, placed_order, mailer, monkeypatch):
        from storefront.services import notification_service

        monkeypatch.setattr(notification_service, "MailClient", lambda: mailer)

        assert notification_service.dispatch_outbox_task() == {"sent": 1, "failed": 0}
        assert len(mailer.sent) == 1

    def test_schedule_dispatch_swallows_broker_errors(self, monkeypatch):
        from types import SimpleNamespace

        from storefront.services import notification_service

        monkeypatch.undo()  # drop the autouse stub, exercise the real method

        def broker_down():
            raise ConnectionError("broker unreachable")

        monkeypatch.setattr(notification_service, "dispatch_outbox_task", SimpleNamespace(delay=broker_down))

        NotificationService.schedule_dispatch()


class TestConcurrentDispatchers:
    def _enqueue_low_stock(self, db, count):
        svc = NotificationService(db)
        for i in range(count):
            svc.enqueue(LOW_STOCK, {"name": f"P{i}", "sku": f"S{i}", "current_stock": 1, "threshold": 10, "recipients": ["ops@example.com"]})
        db.commit()

    def test_second_worker_during_send_does_not_resend(self, db):
        self._enqueue_low_stock(db, 2)

        class OverlappingMailer:
            """Starts a second dispatcher while the first delivery is in flight."""

            def __init__(self):
                self.sent = []
                self.overlapped = False

            def send(self, to, subject, body):
                if not self.overlapped:
                    self.overlapped = True
                    other = SessionLocal()
                    try:
                        dispatch_outbox(other, self)
                    finally:
                        other.close()
                self.sent.append(subject)

        overlapping = OverlappingMailer()
        dispatch_outbox(db, overlapping)

        assert len(overlapping.sent) == 2
        assert sorted(overlapping.sent) == sorted(set(overlapping.sent))
        assert [m.status for m in _messages(db)] == ["SENT", "SENT"]
        assert [m.attempts for m in _messages(db)] == [1, 1]

    def test_fresh_claim_is_skipped(self, db, mailer):
        self._enqueue_low_stock(db, 1)
        [message] = _messages(db)
        message.status = "SENDING"
        message.claimed_at = datetime.now(timezone.utc)
        db.commit()

        assert dispatch_outbox(db, mailer) == {"sent": 0, "failed": 0}
        assert mailer.sent == []

    def test_stale_claim_is_taken_over(self, db, mailer):
        self._enqueue_low_stock(db, 1)
        [message] = _messages(db)
        message.status = "SENDING"
        message.attempts = 1
        message.claimed_at = datetime.now(timezone.utc) - timedelta(hours=1)
        db.commit()

        assert dispatch_outbox(db, mailer, claim_timeout=60) == {"sent": 1, "failed": 0}
        db.refresh(message)
        assert message.status == "SENT"
        assert message.attempts == 2

    def test_claim_is_lost_to_other_worker(self, db):
        self._enqueue_low_stock(db, 1)
        [message] = _messages(db)
        repo = OutboxRepo(db)
        now = datetime.now(timezone.utc)
        stale_before = now - timedelta(minutes=5)

        assert repo.claim(message.id, now, stale_before) is True
        db.commit()
        assert repo.claim(message.id, now, stale_before) is False
