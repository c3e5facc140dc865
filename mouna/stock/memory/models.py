from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text

from mouna.database import Base


class SavedProduct(Base):
    """
    Barcode → metadata memory learned from past entries.

    Independent of stock: rows outlive product deletion and are never touched
    by a backup restore.
    """

    __tablename__ = "saved_products"

    barcode = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    image = Column(Text, nullable=True)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
