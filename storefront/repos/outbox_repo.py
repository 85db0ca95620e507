# storefront/repos/outbox_repo.py
from datetime import datetime

from sqlalchemy import and_, or_, select, update
from sqlalchemy.orm import Session

from storefront.data.models.outbox import OutboxMessageModel
from storefront.domain.status import OutboxStatus


def _claimable(stale_before: datetime):
    return or_(
        OutboxMessageModel.status == OutboxStatus.PENDING.value,
        and_(
            OutboxMessageModel.status == OutboxStatus.SENDING.value,
            OutboxMessageModel.claimed_at < stale_before,
        ),
    )


class OutboxRepo:
    def __init__(self, db: Session):
        self.db = db

    def add(self, message: OutboxMessageModel) -> OutboxMessageModel:
        self.db.add(message)
        self.db.flush()
        return message

    def get(self, message_id: int) -> OutboxMessageModel | None:
        return self.db.get(OutboxMessageModel, message_id, populate_existing=True)

    def list_claimable_ids(self, limit: int, stale_before: datetime) -> list[int]:
        return list(
            self.db.execute(
                select(OutboxMessageModel.id)
                .where(_claimable(stale_before))
                .order_by(OutboxMessageModel.id.asc())
                .limit(limit)
            ).scalars().all()
        )

    def claim(self, message_id: int, now: datetime, stale_before: datetime) -> bool:
        """
        Move one row to SENDING and count the attempt.
        Returns False when another dispatcher claimed or finished it first.
        """
        result = self.db.execute(
            update(OutboxMessageModel)
            .where(OutboxMessageModel.id == message_id, _claimable(stale_before))
            .values(
                status=OutboxStatus.SENDING.value,
                claimed_at=now,
                attempts=OutboxMessageModel.attempts + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
