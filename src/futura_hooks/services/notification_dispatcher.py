from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from futura_hooks.application.dto.notification import (
    NotificationPayload,
    NotificationRequest,
    OutboundCallConfig,
    OutcallResponse,
    render_notification_text,
)
from futura_hooks.application.exceptions import DecodeError, RemoteError, SerializationError
from futura_hooks.config import DispatcherConfig
from futura_hooks.domain.events import DocumentChangeEvent
from futura_hooks.infrastructure.http.outcall import send_outcall

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Turns a written email request document into one delivery-service call.

    Each ``handle`` call is independent: the config and client are read-only
    and nothing is cached between invocations. Exactly one request is sent
    per successfully decoded document and it is never retried here; the
    delivery service deduplicates on the idempotency key.
    """

    def __init__(self, config: DispatcherConfig, client: httpx.AsyncClient) -> None:
        self._config = config
        self._client = client

    def decode(self, event: DocumentChangeEvent) -> NotificationRequest:
        try:
            return NotificationRequest.model_validate_json(event.after_payload)
        except ValidationError as exc:
            raise DecodeError(str(exc)) from exc

    def build_payload(self, request: NotificationRequest) -> NotificationPayload:
        return NotificationPayload(
            sender=request.sender,
            to=request.to,
            subject=request.subject,
            text=render_notification_text(request.recipient_name, request.user_name),
        )

    def serialize(self, payload: NotificationPayload) -> bytes:
        try:
            return payload.model_dump_json(by_alias=True).encode()
        except (PydanticSerializationError, UnicodeEncodeError) as exc:
            raise SerializationError(str(exc)) from exc

    def idempotency_key(self, document_key: str) -> str:
        return f"{self._config.idempotency_key_prefix}{document_key}"

    def build_call(self, document_key: str, body: bytes) -> OutboundCallConfig:
        idempotency_key = self.idempotency_key(document_key)
        try:
            idempotency_key.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise SerializationError(f"document key is not valid text: {exc}") from exc

        return OutboundCallConfig(
            url=self._config.url,
            method="POST",
            body=body,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._config.token}",
                "idempotency-key": idempotency_key,
            },
            max_response_bytes=self._config.max_response_bytes,
            timeout_seconds=self._config.timeout_seconds,
        )

    async def dispatch(self, call: OutboundCallConfig) -> OutcallResponse:
        return await send_outcall(self._client, call)

    @staticmethod
    def classify(response: OutcallResponse) -> None:
        if 200 <= response.status < 300:
            return
        raise RemoteError(response.status, response.body.decode("utf-8", errors="replace"))

    def prepare(self, event: DocumentChangeEvent) -> tuple[NotificationRequest, OutboundCallConfig]:
        """Everything up to the network call; raises before anything is sent."""
        request = self.decode(event)
        payload = self.build_payload(request)
        return request, self.build_call(event.key, self.serialize(payload))

    async def send(self, request: NotificationRequest, call: OutboundCallConfig) -> None:
        response = await self.dispatch(call)
        self.classify(response)
        logger.info(
            "Email sent successfully to %s (key=%s)",
            request.to, call.headers["idempotency-key"],
        )

    async def handle(self, event: DocumentChangeEvent) -> None:
        request, call = self.prepare(event)
        await self.send(request, call)
