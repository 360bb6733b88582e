"""Delivers document-store write events from Redis Streams to the hooks."""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

import httpx
import redis.asyncio as aioredis

from futura_hooks.config import DispatcherConfig, settings
from futura_hooks.hooks.registry import HookRegistry, build_default_registry
from futura_hooks.infrastructure.bus.redis_streams import OnStreamEntryCallback, RedisStreamConsumer
from futura_hooks.infrastructure.bus.serializer import deserialize_stream_entry

logger = logging.getLogger(__name__)


def make_entry_handler(registry: HookRegistry) -> OnStreamEntryCallback:
    async def _handle_entry(entry_id: str, fields: dict[str, Any]) -> None:
        event = deserialize_stream_entry(fields)
        outcome = await registry.deliver(event)
        if outcome.ok:
            logger.debug("Entry %s delivered to %s", entry_id, event.kind)
        else:
            logger.warning("Entry %s: %s hook failed: %s", entry_id, event.kind, outcome.error)

    return _handle_entry


async def run_consumer() -> None:
    config = DispatcherConfig.from_settings(settings).validate()
    if not settings.REDIS_URL:
        raise RuntimeError("REDIS_URL must be set to consume document events")

    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=False)
    client = httpx.AsyncClient()
    registry = build_default_registry(config, client, settings.EMAIL_REQUESTS_COLLECTION)
    consumer_name = f"consumer-{uuid.uuid4().hex[:8]}"

    consumer = RedisStreamConsumer(
        redis=redis,
        stream=settings.DOC_EVENTS_STREAM,
        group=settings.DOC_EVENTS_GROUP,
        consumer=consumer_name,
        callback=make_entry_handler(registry),
    )
    await consumer.start()
    logger.info("Document events consumer started (%s)", consumer_name)

    try:
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        pass
    finally:
        await consumer.stop()
        await client.aclose()
        await redis.aclose()


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run_consumer())


if __name__ == "__main__":
    main()
