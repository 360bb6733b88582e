from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Caller:
    """Authenticated event source (the document store) extracted from JWT."""

    subject: str
