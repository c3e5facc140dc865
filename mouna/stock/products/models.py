from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship, validates

from mouna.database import Base
from mouna.timeutils import expiry_day, to_local_naive


class Product(Base):
    """One stock batch: a barcode plus the day it expires, and how many are on the shelf."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    barcode = Column(String, nullable=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)

    # Full value is kept; expiry_day is the merge key derived from it
    expiry = Column(DateTime, nullable=True, index=True)
    expiry_day = Column(Date, nullable=True)

    department = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    image = Column(Text, nullable=True)  # data URI or URL

    added_by_user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    added_by = relationship("User")

    __table_args__ = (
        UniqueConstraint("barcode", "expiry_day", name="uq_product_batch"),
        CheckConstraint("quantity >= 0", name="ck_product_quantity_non_negative"),
    )

    @validates("expiry")
    def _sync_expiry_day(self, key, value):
        value = to_local_naive(value)
        self.expiry_day = expiry_day(value)
        return value
