"""
Local filesystem document storage.

Documents are written under the configured documents directory and served
by the API's ``/files`` static mount, so the returned URL is public.
"""

import asyncio
from pathlib import Path, PurePosixPath

from shopdesk.config import get_logger, get_settings
from shopdesk.core.exceptions import UploadError
from shopdesk.core.interfaces.delivery import IDocumentStorage

logger = get_logger(__name__)


class LocalDocumentStorage(IDocumentStorage):
    """Stores documents on local disk and hands out ``/files`` URLs."""

    def __init__(
        self,
        root: Path | None = None,
        public_base_url: str | None = None,
    ) -> None:
        settings = get_settings()
        self._root = Path(root or settings.storage.documents_dir)
        self._base_url = (public_base_url or settings.api.public_base_url).rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> Path:
        """Map a relative document path to a file under the root."""
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise UploadError(path, "path must stay inside the documents directory")
        return self._root.joinpath(*relative.parts)

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/files/{PurePosixPath(path).as_posix()}"

    async def upload(self, data: bytes, path: str) -> str:
        """Write *data* to *path* and return its public URL."""
        target = self.resolve(path)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._write, target, data)
        except OSError as e:
            logger.error("document_upload_failed", path=path, error=str(e))
            raise UploadError(path, str(e)) from e

        url = self.url_for(path)
        logger.info("document_uploaded", path=path, size=len(data), url=url)
        return url

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)


_document_storage: LocalDocumentStorage | None = None


def get_document_storage() -> LocalDocumentStorage:
    """Get singleton document storage instance."""
    global _document_storage
    if _document_storage is None:
        _document_storage = LocalDocumentStorage()
    return _document_storage
