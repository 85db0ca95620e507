from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Numeric, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    sku = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    price = Column(Numeric(10, 2), nullable=False)
    # only changed through conditional UPDATEs, see ProductRepo
    stock = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="ACTIVE")  # ACTIVE, INACTIVE
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    category = relationship("CategoryModel", lazy="joined")
