from __future__ import annotations

import json
from typing import Any

from futura_hooks.application.exceptions import DecodeError, UnknownHookError
from futura_hooks.domain.events import DocumentChangeEvent, HookEvent
from futura_hooks.domain.value_objects.enums import HookKind


def parse_hook_kind(raw: str) -> HookKind:
    try:
        return HookKind(raw)
    except ValueError:
        raise UnknownHookError(f"Unknown hook: {raw}") from None


def encode_document_data(data: Any) -> bytes:
    """Document data as raw bytes; strings are taken as already-serialized JSON."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        try:
            return data.encode()
        except UnicodeEncodeError as exc:
            raise DecodeError(str(exc)) from exc
    return json.dumps(data).encode()


def deserialize_stream_entry(fields: dict[str, Any]) -> HookEvent:
    """Build a single-document hook event from a stream entry.

    Entry fields: ``hook``, ``collection``, ``key`` and ``data``.
    """
    kind = parse_hook_kind(fields.get("hook", ""))
    collection = fields.get("collection") or None
    documents: list[DocumentChangeEvent] = []
    if "key" in fields:
        documents.append(
            DocumentChangeEvent(
                collection=collection or "",
                key=fields["key"],
                after_payload=encode_document_data(fields.get("data", b"")),
            )
        )
    return HookEvent(kind=kind, collection=collection, documents=documents)
