"""Dispatch table from (hook kind, collection) to handlers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from futura_hooks.application.exceptions import HookError, InvalidEventError, UnknownHookError
from futura_hooks.config import DispatcherConfig
from futura_hooks.domain.events import HookEvent
from futura_hooks.domain.value_objects.enums import HandlerVariant, HookKind
from futura_hooks.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


def validate_event(event: HookEvent) -> None:
    if event.kind.is_single_document and len(event.documents) != 1:
        raise InvalidEventError(
            f"{event.kind} carries exactly one document, got {len(event.documents)}"
        )


class HookHandler(Protocol):
    variant: HandlerVariant

    async def __call__(self, event: HookEvent) -> None: ...


@dataclass(frozen=True, slots=True)
class HookOutcome:
    ok: bool
    error: str | None = None


class NoOpHandler:
    variant = HandlerVariant.NOOP

    async def __call__(self, event: HookEvent) -> None:
        return None


class NotificationDispatchHandler:
    variant = HandlerVariant.NOTIFICATION_DISPATCH

    def __init__(self, dispatcher: NotificationDispatcher) -> None:
        self._dispatcher = dispatcher

    async def __call__(self, event: HookEvent) -> None:
        prepared = [self._dispatcher.prepare(document) for document in event.documents]
        for request, call in prepared:
            await self._dispatcher.send(request, call)


class HookRegistry:
    """Handlers keyed by hook kind and collection.

    A handler registered with ``collection=None`` is the fallback for every
    collection of that kind; an exact collection match takes precedence.
    """

    def __init__(self) -> None:
        self._handlers: dict[tuple[HookKind, str | None], HookHandler] = {}

    def register(
        self,
        kind: HookKind,
        handler: HookHandler,
        *,
        collection: str | None = None,
    ) -> None:
        self._handlers[(kind, collection)] = handler
        logger.debug(
            "Registered %s handler for %s (collection=%s)",
            handler.variant, kind, collection or "*",
        )

    def resolve(self, kind: HookKind, collection: str | None) -> HookHandler:
        handler = self._handlers.get((kind, collection))
        if handler is None:
            handler = self._handlers.get((kind, None))
        if handler is None:
            raise UnknownHookError(f"No handler registered for {kind}")
        return handler

    async def deliver(self, event: HookEvent) -> HookOutcome:
        """Run the matching handler; handler failures are reported, not raised."""
        handler = self.resolve(event.kind, event.collection)
        try:
            validate_event(event)
            await handler(event)
        except HookError as exc:
            logger.warning(
                "Hook %s failed for collection %s: %s",
                event.kind, event.collection, exc,
            )
            return HookOutcome(ok=False, error=str(exc))
        return HookOutcome(ok=True)


def build_default_registry(
    config: DispatcherConfig,
    client: httpx.AsyncClient,
    collection: str,
) -> HookRegistry:
    registry = HookRegistry()
    noop = NoOpHandler()
    for kind in HookKind:
        registry.register(kind, noop)

    dispatcher = NotificationDispatcher(config, client)
    registry.register(
        HookKind.ON_SET_DOC,
        NotificationDispatchHandler(dispatcher),
        collection=collection,
    )
    return registry
