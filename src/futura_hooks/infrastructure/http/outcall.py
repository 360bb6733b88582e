"""Single bounded HTTP outcall over httpx."""
from __future__ import annotations

import asyncio
import logging

import httpx

from futura_hooks.application.dto.notification import OutboundCallConfig, OutcallResponse
from futura_hooks.application.exceptions import SerializationError, TransportError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024


async def _read_capped(response: httpx.Response, limit: int) -> bytes:
    """Read at most ``limit`` bytes of the body; the rest is dropped."""
    chunks: list[bytes] = []
    total = 0
    async for chunk in response.aiter_bytes(chunk_size=_CHUNK_SIZE):
        remaining = limit - total
        if len(chunk) >= remaining:
            chunks.append(chunk[:remaining])
            if len(chunk) > remaining:
                logger.debug("Response body truncated at %d bytes", limit)
            break
        chunks.append(chunk)
        total += len(chunk)
    return b"".join(chunks)


def _encode_headers(headers: dict[str, str]) -> dict[str, bytes]:
    # httpx encodes str header values as ASCII; document keys may be any text
    return {name: value.encode("utf-8") for name, value in headers.items()}


async def send_outcall(client: httpx.AsyncClient, call: OutboundCallConfig) -> OutcallResponse:
    """Send ``call`` once; the whole exchange must finish within its time budget."""
    try:
        headers = _encode_headers(call.headers)
    except UnicodeEncodeError as exc:
        raise SerializationError(f"header value is not valid text: {exc}") from exc

    try:
        async with asyncio.timeout(call.timeout_seconds):
            async with client.stream(
                call.method,
                call.url,
                headers=headers,
                content=call.body,
                timeout=httpx.Timeout(call.timeout_seconds),
            ) as response:
                body = await _read_capped(response, call.max_response_bytes)
                status = response.status_code
    except TimeoutError as exc:
        raise TransportError("Timeout", f"call exceeded its {call.timeout_seconds}s budget") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise TransportError(type(exc).__name__, str(exc) or repr(exc)) from exc
    return OutcallResponse(status=status, body=body)
