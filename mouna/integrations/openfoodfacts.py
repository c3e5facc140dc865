"""Open Food Facts barcode lookup, used as the last-resort source of product names and images."""
from typing import Optional
from urllib.parse import quote

import requests
from fastapi import Request
from loguru import logger
from pydantic import BaseModel
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from mouna.config import Settings


class CatalogProduct(BaseModel):
    barcode: str
    name: Optional[str] = None
    image: Optional[str] = None


class ProductCatalog:
    """
    Read-only client for the public product database.

    The service has no SLA, so every call is bounded by ``timeout`` and retried
    at most ``retries`` times on connection errors and gateway statuses. Any
    failure is reported as "not found" rather than raised.
    """

    def __init__(self, base_url: str, timeout: float = 5.0, retries: int = 1, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or self._build_session(retries)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProductCatalog":
        return cls(
            base_url=settings.PRODUCT_LOOKUP_URL,
            timeout=settings.PRODUCT_LOOKUP_TIMEOUT,
            retries=settings.PRODUCT_LOOKUP_RETRIES,
        )

    @staticmethod
    def _build_session(retries: int) -> requests.Session:
        retry = Retry(
            total=retries,
            connect=retries,
            read=retries,
            backoff_factor=0.3,
            status_forcelist=(502, 503, 504),
            allowed_methods=frozenset(["GET"]),
            raise_on_status=False,
        )
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers.update({"User-Agent": "Mouna/1.0 (inventory lookup)"})
        return session

    def fetch(self, barcode: str) -> Optional[CatalogProduct]:
        url = f"{self.base_url}/{quote(barcode, safe='')}.json"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Product lookup failed for barcode {barcode}: {e}")
            return None

        if not isinstance(data, dict) or data.get("status") != 1:
            logger.debug(f"Barcode {barcode} not in external product database")
            return None

        product = data.get("product") or {}
        name = product.get("product_name_ar") or product.get("product_name")
        image = product.get("image_url")
        if not name and not image:
            return None

        return CatalogProduct(barcode=barcode, name=name or None, image=image or None)

    def close(self):
        self.session.close()


def get_product_catalog(request: Request) -> ProductCatalog:
    return request.app.state.product_catalog
