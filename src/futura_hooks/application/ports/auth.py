from __future__ import annotations

from typing import Protocol

from futura_hooks.application.dto.caller import Caller


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Caller: ...
