"""Barcode resolution: what do we know about this barcode, and from where?"""
from loguru import logger
from sqlalchemy.orm import Session, joinedload

from mouna.integrations.openfoodfacts import ProductCatalog
from mouna.stock.memory import service as memory_service

from .models import Product
from .service import memory_row

NOT_FOUND = {"found": False, "exists": False, "from_memory": False, "source": None, "product": None}


def resolve_barcode(db: Session, barcode: str, catalog: ProductCatalog) -> dict:
    """
    Look in stock first, then the memory table, then the external product
    database. An unreachable external database is treated as not found.
    """
    barcode = barcode.strip()
    if not barcode:
        return dict(NOT_FOUND)

    # 1. In stock
    product = (
        db.query(Product)
        .options(joinedload(Product.added_by))
        .filter(Product.barcode == barcode)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .first()
    )
    if product:
        return {"found": True, "exists": True, "from_memory": False, "source": "stock", "product": product}

    # 2. Known from an earlier entry
    saved = memory_service.get_saved_product(db, barcode)
    if saved:
        return {"found": True, "exists": False, "from_memory": True, "source": "memory", "product": memory_row(saved)}

    # 3. Public product database
    external = catalog.fetch(barcode)
    if external:
        logger.info(f"Barcode {barcode} resolved externally: {external.name}")
        return {
            "found": True,
            "exists": False,
            "from_memory": False,
            "source": "external",
            "product": {
                "id": None,
                "barcode": barcode,
                "name": external.name or "",
                "image": external.image,
                "quantity": 0,
            },
        }

    return dict(NOT_FOUND)
