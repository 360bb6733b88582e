from __future__ import annotations

import json
from dataclasses import dataclass, field

import pytest

from futura_hooks.application.exceptions import UnknownHookError
from futura_hooks.domain.value_objects.enums import HookKind
from futura_hooks.hooks.registry import build_default_registry
from futura_hooks.infrastructure.bus.redis_streams import RedisStreamConsumer
from futura_hooks.infrastructure.bus.serializer import deserialize_stream_entry
from futura_hooks.workers.doc_events_consumer import make_entry_handler
from tests.conftest import make_request_data


@dataclass
class FakeRedis:
    acked: list[tuple[str, str, str]] = field(default_factory=list)

    async def xack(self, stream: str, group: str, entry_id: str) -> None:
        self.acked.append((stream, group, entry_id))


def _fields(**overrides: str) -> dict[str, str]:
    fields = {
        "hook": "on_set_doc",
        "collection": "email_requests",
        "key": "doc42",
        "data": json.dumps(make_request_data()),
    }
    fields.update(overrides)
    return fields


def test_deserialize_stream_entry():
    event = deserialize_stream_entry(_fields())

    assert event.kind == HookKind.ON_SET_DOC
    assert event.collection == "email_requests"
    assert len(event.documents) == 1
    assert event.documents[0].key == "doc42"
    assert json.loads(event.documents[0].after_payload)["user_name"] == "Alice"


def test_deserialize_stream_entry_without_document():
    event = deserialize_stream_entry({"hook": "on_delete_many_assets"})

    assert event.kind == HookKind.ON_DELETE_MANY_ASSETS
    assert event.collection is None
    assert event.documents == []


def test_deserialize_unknown_hook():
    with pytest.raises(UnknownHookError):
        deserialize_stream_entry(_fields(hook="on_explode"))


@pytest.mark.asyncio
async def test_entry_delivered_and_acked(dispatcher_config, http_client, delivery_service):
    registry = build_default_registry(dispatcher_config, http_client, "email_requests")
    redis = FakeRedis()
    consumer = RedisStreamConsumer(
        redis=redis,  # type: ignore[arg-type]
        stream="satellite.doc_events",
        group="futura-hooks",
        consumer="consumer-test",
        callback=make_entry_handler(registry),
    )

    await consumer.process_entry("1-0", _fields())

    assert delivery_service.requests[0].headers["idempotency-key"] == "futura-doc42"
    assert redis.acked == [("satellite.doc_events", "futura-hooks", "1-0")]


@pytest.mark.asyncio
async def test_failed_entry_is_still_acked(dispatcher_config, http_client, delivery_service):
    delivery_service.status_code = 500
    registry = build_default_registry(dispatcher_config, http_client, "email_requests")
    redis = FakeRedis()
    consumer = RedisStreamConsumer(
        redis=redis,  # type: ignore[arg-type]
        stream="satellite.doc_events",
        group="futura-hooks",
        consumer="consumer-test",
        callback=make_entry_handler(registry),
    )

    await consumer.process_entry("2-0", _fields())
    await consumer.process_entry("3-0", _fields(hook="on_explode"))

    assert len(delivery_service.requests) == 1
    assert [entry_id for _, _, entry_id in redis.acked] == ["2-0", "3-0"]


@pytest.mark.asyncio
async def test_undecodable_entry_is_acked_and_batch_continues(dispatcher_config, http_client, delivery_service):
    registry = build_default_registry(dispatcher_config, http_client, "email_requests")
    redis = FakeRedis()
    consumer = RedisStreamConsumer(
        redis=redis,  # type: ignore[arg-type]
        stream="satellite.doc_events",
        group="futura-hooks",
        consumer="consumer-test",
        callback=make_entry_handler(registry),
    )
    good = {name.encode(): value.encode() for name, value in _fields(key="doc43").items()}

    await consumer.process_entry(b"4-0", {b"hook": b"on_set_doc", b"key": b"\xff\xfe"})
    await consumer.process_entry(b"5-0", good)

    assert len(delivery_service.requests) == 1
    assert delivery_service.requests[0].headers["idempotency-key"] == "futura-doc43"
    assert [entry_id for _, _, entry_id in redis.acked] == ["4-0", "5-0"]
