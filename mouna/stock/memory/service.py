from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import SavedProduct


def get_saved_product(db: Session, barcode: str) -> Optional[SavedProduct]:
    return db.query(SavedProduct).filter(SavedProduct.barcode == barcode).first()


def remember_product(
    db: Session,
    barcode: Optional[str],
    name: Optional[str],
    category: Optional[str],
    image: Optional[str],
) -> Optional[SavedProduct]:
    """
    Upsert the memory row for ``barcode``. Best-effort: commits on its own and
    logs instead of raising, so a failure here never blocks a stock write.
    An empty image keeps the remembered one.
    """
    if not barcode or not name:
        return None

    try:
        saved = get_saved_product(db, barcode)
        if saved:
            saved.name = name
            saved.category = category
            if image:
                saved.image = image
            saved.updated_at = datetime.utcnow()
        else:
            saved = SavedProduct(
                barcode=barcode,
                name=name,
                category=category,
                image=image or None,
                updated_at=datetime.utcnow(),
            )
            db.add(saved)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Memory save failed for barcode {barcode}")
        return None

    return saved
