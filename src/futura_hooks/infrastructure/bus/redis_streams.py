"""Redis Streams consumer for document-store write events."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)

OnStreamEntryCallback = Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]]


def _as_text(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


class RedisStreamConsumer:
    """XREADGROUP-based consumer for a single stream + consumer group.

    The client must be created with ``decode_responses=False``; each entry is
    decoded on its own so one bad entry cannot stall the batch. Entries are
    acknowledged once the callback returns, and also when it raises or the
    entry cannot be decoded: a failed delivery is logged and never re-read.
    """

    def __init__(
        self,
        redis: aioredis.Redis,
        stream: str,
        group: str,
        consumer: str,
        callback: OnStreamEntryCallback,
        *,
        batch_size: int = 10,
        block_ms: int = 5000,
    ) -> None:
        self._redis = redis
        self._stream = stream
        self._group = group
        self._consumer = consumer
        self._callback = callback
        self._batch_size = batch_size
        self._block_ms = block_ms
        self._task: asyncio.Task[None] | None = None

    async def ensure_group(self) -> None:
        try:
            await self._redis.xgroup_create(
                self._stream, self._group, id="$", mkstream=True
            )
            logger.info("Created consumer group %s on %s", self._group, self._stream)
        except aioredis.ResponseError as e:
            if "BUSYGROUP" in str(e):
                logger.debug("Consumer group %s already exists", self._group)
            else:
                raise

    async def start(self) -> None:
        await self.ensure_group()
        self._task = asyncio.create_task(self._consume(), name="doc-events-consumer")
        logger.info("Stream consumer started: stream=%s group=%s", self._stream, self._group)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            logger.info("Stream consumer stopped")

    async def process_entry(self, entry_id: bytes | str, fields: dict[Any, Any]) -> None:
        entry_id = _as_text(entry_id)
        try:
            decoded = {_as_text(name): _as_text(value) for name, value in fields.items()}
        except UnicodeDecodeError as exc:
            logger.warning("Dropping stream entry %s with undecodable fields: %s", entry_id, exc)
        else:
            try:
                await self._callback(entry_id, decoded)
            except Exception:
                logger.exception("Error processing stream entry %s", entry_id)
        await self._redis.xack(self._stream, self._group, entry_id)

    async def _consume(self) -> None:
        while True:
            try:
                entries = await self._redis.xreadgroup(
                    groupname=self._group,
                    consumername=self._consumer,
                    streams={self._stream: ">"},
                    count=self._batch_size,
                    block=self._block_ms,
                )
                if not entries:
                    continue
                for _stream_name, messages in entries:
                    for entry_id, fields in messages:
                        await self.process_entry(entry_id, fields)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Stream consumer error, retrying in 5s")
                await asyncio.sleep(5)
