from datetime import date
from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

from mouna.integrations.onesignal import OneSignalClient
from mouna.stock.products.models import Product
from mouna.timeutils import expiring_soon_window

HEADING = "تنبيه انتهاء الصلاحية"


def find_expiring_products(db: Session, today: Optional[date] = None) -> List[Product]:
    window_start, window_end = expiring_soon_window(today)
    return (
        db.query(Product)
        .filter(Product.expiry >= window_start, Product.expiry <= window_end)
        .order_by(Product.expiry)
        .all()
    )


def expiry_message(count: int) -> str:
    return f"⚠️ تنبيه: لديكم {count} منتجات ستنتهي صلاحيتها قريباً! تفقد المخزون الآن."


def check_expiry(db: Session, notifier: OneSignalClient, today: Optional[date] = None) -> dict:
    """
    Broadcast one push notification when batches expire within the next week.

    Nothing expiring is a no-op. A missing provider key only skips the send.
    A provider error is raised as ExternalDependencyFailure by the client.
    """
    expiring = find_expiring_products(db, today)
    if not expiring:
        return {"message": "No expiring products found."}

    count = len(expiring)

    if not notifier.configured:
        logger.warning("Skipping OneSignal: No REST API Key found")
        return {"message": "Found products but missing API key", "count": count}

    result = notifier.broadcast(expiry_message(count), HEADING)
    logger.info(f"Expiry alert sent for {count} products (OneSignal id {result.get('id')})")

    return {
        "success": True,
        "productsFound": count,
        "notificationSent": True,
        "oneSignalId": result.get("id"),
    }
