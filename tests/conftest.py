from datetime import datetime, time, timedelta

import pytest
from fastapi.testclient import TestClient

from mouna.config import Settings
from mouna.integrations.onesignal import get_notifier
from mouna.integrations.openfoodfacts import get_product_catalog
from mouna.main import create_app
from mouna.timeutils import local_today


class FakeCatalog:
    def __init__(self):
        self.products = {}
        self.calls = []

    def fetch(self, barcode):
        self.calls.append(barcode)
        return self.products.get(barcode)

    def close(self):
        pass


class FakeNotifier:
    def __init__(self, api_key="test-key"):
        self.api_key = api_key
        self.calls = []
        self.error = None

    @property
    def configured(self):
        return bool(self.api_key)

    def broadcast(self, message, heading):
        self.calls.append({"message": message, "heading": heading})
        if self.error:
            raise self.error
        return {"id": "notification-1", "recipients": 3}

    def close(self):
        pass


def expiry_on(days_from_today, hour=12):
    """ISO datetime string `days_from_today` days away, at `hour` o'clock shop time."""
    day = local_today() + timedelta(days=days_from_today)
    return datetime.combine(day, time(hour, 0)).isoformat()


@pytest.fixture
def app():
    return create_app(Settings(DATABASE_URL="sqlite://", LOG_FILE=None, LOG_LEVEL="WARNING"))


@pytest.fixture
def catalog(app):
    fake = FakeCatalog()
    app.dependency_overrides[get_product_catalog] = lambda: fake
    return fake


@pytest.fixture
def notifier(app):
    fake = FakeNotifier()
    app.dependency_overrides[get_notifier] = lambda: fake
    return fake


@pytest.fixture
def client(app, catalog, notifier):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session_factory(client):
    return client.app.state.session_factory


@pytest.fixture
def admin(client):
    response = client.post(
        "/api/users",
        json={"username": "admin", "password": "admin-pass", "name": "المدير العام", "role": "admin"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def add_product(client, admin):
    def _add(**overrides):
        body = {
            "barcode": "6281007823",
            "name": "حليب المراعي 1L",
            "category": "الألبان",
            "expiry": expiry_on(30),
            "department": "الثلاجة 1",
            "quantity": 1,
            "addedByUserId": admin["id"],
        }
        body.update(overrides)
        return client.post("/api/products", json=body)

    return _add
