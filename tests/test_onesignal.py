import pytest
import requests

from mouna.exceptions import ExternalDependencyFailure
from mouna.integrations.onesignal import OneSignalClient


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code
        self.text = str(payload)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response

    def close(self):
        pass


def make_client(**kwargs):
    session = FakeSession(**kwargs)
    client = OneSignalClient(
        api_key="rest-key",
        app_id="app-1",
        api_url="https://onesignal.com/api/v1/notifications",
        session=session,
    )
    return client, session


def test_broadcast_targets_all_subscribers():
    client, session = make_client(response=FakeResponse({"id": "n-1", "recipients": 10}))

    result = client.broadcast("3 products", "heading")

    assert result["id"] == "n-1"
    sent = session.posts[0]
    assert sent["headers"]["Authorization"] == "Basic rest-key"
    assert sent["json"]["app_id"] == "app-1"
    assert sent["json"]["included_segments"] == ["Total Subscriptions"]
    assert sent["json"]["contents"] == {"en": "3 products", "ar": "3 products"}


def test_error_payload_raises_with_provider_details():
    client, _ = make_client(response=FakeResponse({"errors": ["All included players are not subscribed"]}))

    with pytest.raises(ExternalDependencyFailure) as exc_info:
        client.broadcast("m", "h")

    assert exc_info.value.status_code == 502
    assert exc_info.value.detail["details"] == ["All included players are not subscribed"]


def test_unreachable_provider_raises():
    client, _ = make_client(error=requests.ConnectionError("dns failure"))

    with pytest.raises(ExternalDependencyFailure):
        client.broadcast("m", "h")


def test_configured_depends_on_api_key():
    assert OneSignalClient(None, "app", "https://x").configured is False
    assert OneSignalClient("key", "app", "https://x").configured is True
