"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from futura_hooks.application.dto.caller import Caller
from futura_hooks.application.ports.auth import TokenVerifier
from futura_hooks.config import settings
from futura_hooks.hooks.registry import HookRegistry
from futura_hooks.infrastructure.auth.hs256_verifier import HS256Verifier

_bearer_scheme = HTTPBearer(auto_error=False)


def get_registry(request: Request) -> HookRegistry:
    return request.app.state.registry


RegistryDep = Annotated[HookRegistry, Depends(get_registry)]


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = HS256Verifier(settings.HOOKS_JWT_SECRET, settings.HOOKS_JWT_ALGORITHM)
    return _verifier


async def get_current_caller(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> Caller:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    verifier = get_verifier()
    try:
        return await verifier.verify(credentials.credentials)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc


CurrentCaller = Annotated[Caller, Depends(get_current_caller)]
