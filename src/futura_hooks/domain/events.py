from __future__ import annotations

from dataclasses import dataclass, field

from futura_hooks.domain.value_objects.enums import HookKind


@dataclass(frozen=True, slots=True)
class DocumentChangeEvent:
    """The "after" state of one document write."""

    collection: str
    key: str
    after_payload: bytes


@dataclass(frozen=True, slots=True)
class HookEvent:
    kind: HookKind
    collection: str | None = None
    documents: list[DocumentChangeEvent] = field(default_factory=list)
