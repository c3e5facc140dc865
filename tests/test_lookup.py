import requests

from mouna.integrations.openfoodfacts import CatalogProduct, ProductCatalog
from mouna.stock.memory.models import SavedProduct


def test_lookup_prefers_stock(client, add_product, catalog):
    add_product(barcode="100", quantity=6)

    body = client.get("/api/products/lookup/100").json()

    assert body["found"] is True
    assert body["exists"] is True
    assert body["fromMemory"] is False
    assert body["source"] == "stock"
    assert body["product"]["quantity"] == 6
    assert catalog.calls == []


def test_lookup_falls_back_to_memory(client, session_factory, catalog):
    with session_factory() as db:
        db.add(SavedProduct(barcode="200", name="جبنة كرافت", category="الأجبان"))
        db.commit()

    body = client.get("/api/products/lookup/200").json()

    assert body["source"] == "memory"
    assert body["exists"] is False
    assert body["fromMemory"] is True
    assert body["product"]["id"] is None
    assert body["product"]["quantity"] == 0
    assert catalog.calls == []


def test_lookup_falls_back_to_external_database(client, catalog):
    catalog.products["300"] = CatalogProduct(barcode="300", name="Nutella", image="https://img.example/n.jpg")

    body = client.get("/api/products/lookup/300").json()

    assert body["found"] is True
    assert body["source"] == "external"
    assert body["exists"] is False
    assert body["fromMemory"] is False
    assert body["product"]["name"] == "Nutella"
    assert body["product"]["image"] == "https://img.example/n.jpg"


def test_lookup_not_found(client, catalog):
    body = client.get("/api/products/lookup/400").json()

    assert body == {"found": False, "exists": False, "fromMemory": False, "source": None, "product": None}
    assert catalog.calls == ["400"]


# ---------------- Open Food Facts client ----------------

class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, timeout=None):
        self.requests.append((url, timeout))
        if self.error:
            raise self.error
        return self.response

    def close(self):
        pass


def make_catalog(**kwargs):
    session = FakeSession(**kwargs)
    return ProductCatalog("https://world.openfoodfacts.org/api/v0/product/", timeout=5, session=session), session


def test_catalog_prefers_arabic_name_and_sets_timeout():
    catalog, session = make_catalog(response=FakeResponse({
        "status": 1,
        "product": {"product_name": "Milk", "product_name_ar": "حليب", "image_url": "https://img/x.jpg"},
    }))

    product = catalog.fetch("6281007823")

    assert product.name == "حليب"
    assert product.image == "https://img/x.jpg"
    assert session.requests == [("https://world.openfoodfacts.org/api/v0/product/6281007823.json", 5)]


def test_catalog_status_zero_is_not_found():
    catalog, _ = make_catalog(response=FakeResponse({"status": 0, "status_verbose": "product not found"}))
    assert catalog.fetch("1") is None


def test_catalog_network_failure_is_not_found():
    catalog, _ = make_catalog(error=requests.ConnectionError("offline"))
    assert catalog.fetch("1") is None


def test_catalog_bad_json_is_not_found():
    catalog, _ = make_catalog(response=FakeResponse(ValueError("not json")))
    assert catalog.fetch("1") is None


def test_catalog_http_error_is_not_found():
    catalog, _ = make_catalog(response=FakeResponse({}, status_code=503))
    assert catalog.fetch("1") is None


def test_catalog_non_object_body_is_not_found():
    catalog, _ = make_catalog(response=FakeResponse(["unexpected", "shape"]))
    assert catalog.fetch("1") is None
