from datetime import datetime, time, timedelta

from mouna.dashboard.service import get_dashboard_stats
from mouna.stock.products.models import Product
from mouna.timeutils import expiring_soon_window, local_today

from conftest import expiry_on


def test_dashboard_counts_expired_and_expiring_soon(client, add_product):
    for offset, barcode in ((-1, "a"), (0, "b"), (3, "c"), (10, "d")):
        add_product(barcode=barcode, expiry=expiry_on(offset))

    body = client.get("/api/dashboard-stats").json()

    assert body == {"totalProducts": 4, "expiredCount": 1, "expiringSoonCount": 2}


def test_expiring_window_is_inclusive_through_day_seven(session_factory):
    today = local_today()
    with session_factory() as db:
        db.add(Product(name="last day", expiry=datetime.combine(today + timedelta(days=7), time(23, 59)), quantity=1))
        db.add(Product(name="day eight", expiry=datetime.combine(today + timedelta(days=8), time(0, 0)), quantity=1))
        db.add(Product(name="start of today", expiry=datetime.combine(today, time.min), quantity=1))
        db.commit()

        stats = get_dashboard_stats(db, today=today)

    assert stats["expired_count"] == 0
    assert stats["expiring_soon_count"] == 2


def test_window_bounds():
    today = local_today()
    start, end = expiring_soon_window(today)

    assert start == datetime.combine(today, time.min)
    assert end.date() == today + timedelta(days=7)
    assert end.time() == time.max
