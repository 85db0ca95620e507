# storefront/data/models/outbox.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON

from storefront.data.database import Base


class OutboxMessageModel(Base):
    __tablename__ = "outbox_messages"

    id = Column(Integer, primary_key=True)
    topic = Column(String, nullable=False)  # order.confirmation, inventory.low_stock
    payload = Column(JSON, nullable=False)

    status = Column(String, nullable=False, default="PENDING", index=True)  # PENDING, SENDING, SENT, FAILED
    attempts = Column(Integer, nullable=False, default=0)
    # set while a dispatcher owns the row; a stale claim is picked up again
    claimed_at = Column(DateTime(timezone=True), nullable=True)
    last_error = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    sent_at = Column(DateTime(timezone=True), nullable=True)
