"""OneSignal REST client for broadcast push notifications."""
from typing import Any, Dict, Optional

import requests
from fastapi import Request
from loguru import logger

from mouna.config import Settings
from mouna.exceptions import ExternalDependencyFailure

PROVIDER = "OneSignal"
ALL_SUBSCRIBERS = "Total Subscriptions"


class OneSignalClient:
    def __init__(
        self,
        api_key: Optional[str],
        app_id: str,
        api_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.app_id = app_id
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "OneSignalClient":
        return cls(
            api_key=settings.ONESIGNAL_REST_API_KEY,
            app_id=settings.ONESIGNAL_APP_ID,
            api_url=settings.ONESIGNAL_API_URL,
            timeout=settings.ONESIGNAL_TIMEOUT,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def broadcast(self, message: str, heading: str) -> Dict[str, Any]:
        """Send one notification to every subscriber. Returns the provider response body."""
        payload = {
            "app_id": self.app_id,
            "contents": {"en": message, "ar": message},
            "headings": {"en": heading, "ar": heading},
            "included_segments": [ALL_SUBSCRIBERS],
        }
        headers = {
            "Content-Type": "application/json; charset=utf-8",
            "Authorization": f"Basic {self.api_key}",
        }

        try:
            response = self.session.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"OneSignal unreachable: {e}")
            raise ExternalDependencyFailure(PROVIDER, "OneSignal unreachable", str(e))

        try:
            result = response.json()
        except ValueError:
            logger.error(f"OneSignal returned non-JSON body (HTTP {response.status_code})")
            raise ExternalDependencyFailure(PROVIDER, "OneSignal Failed", response.text)

        if result.get("errors"):
            logger.error(f"OneSignal API Error: {result['errors']}")
            raise ExternalDependencyFailure(PROVIDER, "OneSignal Failed", result["errors"])

        if not response.ok:
            logger.error(f"OneSignal HTTP {response.status_code}: {result}")
            raise ExternalDependencyFailure(PROVIDER, "OneSignal Failed", result)

        return result

    def close(self):
        self.session.close()


def get_notifier(request: Request) -> OneSignalClient:
    return request.app.state.notifier
