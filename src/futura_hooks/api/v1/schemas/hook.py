from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class HookDocumentIn(BaseModel):
    key: str
    data: dict[str, Any] | str


class HookEventIn(BaseModel):
    collection: str | None = None
    documents: list[HookDocumentIn] = []


class HookOutcomeResponse(BaseModel):
    ok: bool
    error: str | None = None
