from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from mouna.stock.products.models import Product
from mouna.timeutils import expiring_soon_window, local_today, start_of_day


def get_dashboard_stats(db: Session, today: Optional[date] = None) -> dict:
    """
    Totals for the home screen. Expired means expiry before the start of today;
    expiring soon means from the start of today through the end of today + 7 days.
    """
    today = today or local_today()
    window_start, window_end = expiring_soon_window(today)

    total_products = db.query(Product).count()

    expired_count = (
        db.query(Product)
        .filter(Product.expiry < start_of_day(today))
        .count()
    )

    expiring_soon_count = (
        db.query(Product)
        .filter(Product.expiry >= window_start, Product.expiry <= window_end)
        .count()
    )

    return {
        "total_products": total_products,
        "expired_count": expired_count,
        "expiring_soon_count": expiring_soon_count,
    }
