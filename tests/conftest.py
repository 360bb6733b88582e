"""Shared test fixtures."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx
import pytest

from futura_hooks.config import DispatcherConfig
from futura_hooks.domain.events import DocumentChangeEvent
from futura_hooks.services.notification_dispatcher import NotificationDispatcher

NOTIFICATIONS_URL = "https://notifications.test/notifications/email"

EXPECTED_TEXT = (
    "Hello Bob,\n\n"
    "Alice has shared some files with you through Futura.\n\n"
    "You can access your shared files at: https://futura.app\n\n"
    "Best regards,\n"
    "The Futura Team"
)


def make_request_data(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "from": "a@x.com",
        "to": "b@x.com",
        "subject": "S",
        "text": "ignored",
        "user_name": "Alice",
        "recipient_name": "Bob",
    }
    data.update(overrides)
    return data


def make_event(
    *,
    key: str = "doc42",
    data: dict[str, Any] | None = None,
    raw: bytes | None = None,
    collection: str = "email_requests",
) -> DocumentChangeEvent:
    payload = raw if raw is not None else json.dumps(data or make_request_data()).encode()
    return DocumentChangeEvent(collection=collection, key=key, after_payload=payload)


@dataclass
class FakeDeliveryService:
    """httpx.MockTransport handler that records every request it receives."""

    status_code: int = 202
    body: bytes = b""
    error: Callable[[httpx.Request], Exception] | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        return httpx.Response(status_code=self.status_code, content=self.body)

    @property
    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def dispatcher_config() -> DispatcherConfig:
    return DispatcherConfig(url=NOTIFICATIONS_URL, token="secret-token")


@pytest.fixture
def delivery_service() -> FakeDeliveryService:
    return FakeDeliveryService()


@pytest.fixture
def http_client(delivery_service: FakeDeliveryService) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(delivery_service))


@pytest.fixture
def dispatcher(dispatcher_config: DispatcherConfig, http_client: httpx.AsyncClient) -> NotificationDispatcher:
    return NotificationDispatcher(dispatcher_config, http_client)
