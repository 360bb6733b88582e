from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from futura_hooks.api.deps import CurrentCaller, RegistryDep
from futura_hooks.api.v1.schemas.hook import HookEventIn, HookOutcomeResponse
from futura_hooks.domain.events import DocumentChangeEvent, HookEvent
from futura_hooks.hooks.registry import validate_event
from futura_hooks.infrastructure.bus.serializer import encode_document_data, parse_hook_kind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/hooks", tags=["hooks"])


@router.post("/{kind}", response_model=HookOutcomeResponse)
async def deliver_hook(
    kind: str,
    body: HookEventIn,
    caller: CurrentCaller,
    registry: RegistryDep,
) -> JSONResponse:
    event = HookEvent(
        kind=parse_hook_kind(kind),
        collection=body.collection,
        documents=[
            DocumentChangeEvent(
                collection=body.collection or "",
                key=doc.key,
                after_payload=encode_document_data(doc.data),
            )
            for doc in body.documents
        ],
    )
    validate_event(event)
    logger.info(
        "Hook %s from %s (collection=%s, documents=%d)",
        event.kind, caller.subject, event.collection, len(event.documents),
    )

    outcome = await registry.deliver(event)
    status_code = 200 if outcome.ok else 502
    return JSONResponse(
        status_code=status_code,
        content=HookOutcomeResponse(ok=outcome.ok, error=outcome.error).model_dump(),
    )
