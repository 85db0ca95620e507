from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, DateTime

from storefront.data.database import Base


class ProductViewModel(Base):
    """One row per visit; repeat views inside the visit window only bump viewed_at."""

    __tablename__ = "product_views"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    viewed_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
