"""
Blob storage for scholarship images and profile pictures.

Blobs are written under settings.UPLOAD_DIR and served by the /uploads static
mount, so a blob URL is ``{PUBLIC_BASE_URL}/uploads/{name}``.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from iskolar.core.config import settings
from iskolar.core.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

UPLOAD_ROUTE = "/uploads"


class BlobStore(ABC):
    @abstractmethod
    def upload(self, name: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``name`` and return its public URL."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove a blob; a missing blob is not an error."""

    @abstractmethod
    def name_from_url(self, url: str) -> Optional[str]:
        ...


class LocalBlobStore(BlobStore):
    def __init__(self, root: str, public_base_url: str):
        self.root = Path(root).resolve()
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, name: str) -> Path:
        path = (self.root / name).resolve()
        if self.root not in path.parents:
            raise StorageError(f"Blob name escapes the upload directory: {name}")
        return path

    def upload(self, name: str, data: bytes, content_type: str) -> str:
        path = self._path(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error("Failed to write blob %s: %s", name, e)
            raise StorageError() from e
        logger.info("Stored blob %s (%d bytes, %s)", name, len(data), content_type)
        return f"{self.public_base_url}{UPLOAD_ROUTE}/{name}"

    def delete(self, name: str) -> None:
        self._path(name).unlink(missing_ok=True)

    def name_from_url(self, url: str) -> Optional[str]:
        if not url:
            return None
        path = urlparse(url).path
        prefix = f"{UPLOAD_ROUTE}/"
        if prefix not in path:
            return None
        return path.split(prefix, 1)[1] or None


def get_blob_store() -> BlobStore:
    return LocalBlobStore(settings.UPLOAD_DIR, settings.PUBLIC_BASE_URL)


def validate_image(content_type: Optional[str], size: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed")
    if size > settings.MAX_IMAGE_SIZE_MB * 1024 * 1024:
        raise ValidationError(f"File too large (max {settings.MAX_IMAGE_SIZE_MB}MB)")


def blob_name(folder: str, prefix: str, filename: Optional[str]) -> str:
    ext = Path(filename or "").suffix.lstrip(".").lower() or "jpg"
    return f"{folder}/{prefix}-{uuid.uuid4()}.{ext}"


def replace_blob(store: BlobStore, old_url: Optional[str], name: str, data: bytes, content_type: str) -> str:
    """Upload a new blob and drop the one it replaces."""
    old_name = store.name_from_url(old_url) if old_url else None
    if old_name:
        try:
            store.delete(old_name)
        except (OSError, StorageError) as e:
            logger.warning("Failed to delete old blob %s: %s", old_name, e)
    return store.upload(name, data, content_type)
