"""In-memory blob storage for development and testing."""

import io
import logging
import threading
from typing import BinaryIO, Dict, Optional

from ..errors import NotFoundError
from ..models import File
from ..sniff import detect_content_type

logger = logging.getLogger(__name__)


class _MemoryBlob:
    """Blob record; doubles as the writer returned by begin_upload."""

    def __init__(self, digest: str, lock: threading.Lock):
        self.digest = digest
        self.contents = bytearray()
        self._lock = lock

    def write(self, data: bytes) -> int:
        with self._lock:
            self.contents.extend(data)
        return len(data)

    def close(self) -> None:
        pass


class InMemoryStorer:
    """
    Dict-backed store keyed by lowercased digest.
    
    A single lock plays the role of a write transaction: the existence check
    and the reservation in begin_upload happen under it. The reservation is
    visible as soon as begin_upload returns and fills in as bytes are written.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._files: Dict[str, _MemoryBlob] = {}

    @staticmethod
    def _key(digest: str) -> str:
        return digest.lower()

    def begin_upload(self, digest: str) -> Optional[_MemoryBlob]:
        """Reserve digest, or return None if a blob already exists."""
        key = self._key(digest)
        with self._lock:
            if key in self._files:
                return None
            blob = _MemoryBlob(key, self._lock)
            self._files[key] = blob
        logger.debug("Reserved in-memory blob %s", key)
        return blob

    def fetch(self, digest: str) -> BinaryIO:
        """Return a snapshot of the blob bytes as a stream."""
        with self._lock:
            blob = self._files.get(self._key(digest))
            if blob is None:
                raise NotFoundError(digest)
            return io.BytesIO(bytes(blob.contents))

    def delete(self, digest: str) -> None:
        """Remove the blob if present."""
        with self._lock:
            self._files.pop(self._key(digest), None)

    def stat(self, digest: str) -> File:
        """Re-derive size and content type from the stored bytes."""
        key = self._key(digest)
        with self._lock:
            blob = self._files.get(key)
            if blob is None:
                raise NotFoundError(digest)
            contents = bytes(blob.contents)
        return File(
            digest=digest,
            size=len(contents),
            content_type=detect_content_type(contents),
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)
