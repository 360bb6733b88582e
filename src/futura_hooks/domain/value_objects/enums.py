from __future__ import annotations

from enum import StrEnum


class HookKind(StrEnum):
    ON_SET_DOC = "on_set_doc"
    ON_SET_MANY_DOCS = "on_set_many_docs"
    ON_DELETE_DOC = "on_delete_doc"
    ON_DELETE_MANY_DOCS = "on_delete_many_docs"
    ON_UPLOAD_ASSET = "on_upload_asset"
    ON_DELETE_ASSET = "on_delete_asset"
    ON_DELETE_MANY_ASSETS = "on_delete_many_assets"

    @property
    def is_single_document(self) -> bool:
        return self in (HookKind.ON_SET_DOC, HookKind.ON_DELETE_DOC)


class HandlerVariant(StrEnum):
    NOOP = "noop"
    NOTIFICATION_DISPATCH = "notification_dispatch"
