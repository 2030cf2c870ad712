"""File-backed document storage."""

from shopdesk.infrastructure.storage.files.local_document_storage import (
    LocalDocumentStorage,
    get_document_storage,
)

__all__ = ["LocalDocumentStorage", "get_document_storage"]
