"""Filesystem blob storage implementation."""

import contextlib
import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional

import portalocker

from ..errors import NotFoundError
from ..hashing import validate_digest
from ..models import File
from ..sniff import detect_content_type

logger = logging.getLogger(__name__)

# Bytes read from the head of a blob when classifying it on stat.
_SNIFF_WINDOW = 8192


def _fsync_dir(path: Path) -> None:
    """Fsync a directory so a rename is durable.

    Best effort: Windows and some filesystems don't support directory fsync.
    """
    try:
        flags = os.O_RDONLY
        if hasattr(os, "O_DIRECTORY"):
            flags |= os.O_DIRECTORY
        fd = os.open(str(path), flags)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except OSError:
        logger.debug("Directory fsync not supported for %s", path)


class _PartialBlobWriter:
    """Writes a blob to ``<hex>.partial`` and renames it into place on close."""

    def __init__(self, store: "FilesystemStorer", partial: Path, dest: Path, fh: BinaryIO):
        self._store = store
        self._partial = partial
        self._dest = dest
        self._fh = fh

    def write(self, data: bytes) -> int:
        return self._fh.write(data)

    def abort(self) -> None:
        """Release the file handle without promoting the partial file."""
        if not self._fh.closed:
            self._fh.close()

    def close(self) -> None:
        if self._fh.closed:
            return
        self._fh.flush()
        os.fsync(self._fh.fileno())
        self._fh.close()
        with self._store._lock_for(self._dest):
            os.replace(str(self._partial), str(self._dest))
        _fsync_dir(self._dest.parent)
        logger.debug("Committed blob: %s", self._dest)


class FilesystemStorer:
    """
    Local filesystem store.
    
    Files are stored with sharding: root/ab/cd/<full_sha256>
    
    An upload in progress is a ``<full_sha256>.partial`` file created with
    O_EXCL under a per-digest portalocker lock, so only one caller at a time
    can reserve a digest. A failed upload leaves its partial file behind until
    the digest is deleted.
    """
    
    def __init__(self, root: Path, lock_timeout: float = 30):
        """
        Initialize filesystem store.
        
        Args:
            root: Base directory for blob storage
            lock_timeout: Seconds to wait for a per-digest lock
        """
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.lock_timeout = lock_timeout
    
    def path_for(self, digest: str) -> Path:
        """
        Get the storage path for a digest.
        
        Raises:
            ValueError: If digest format is invalid
        """
        hex_part = validate_digest(digest.lower())
        return self.root / hex_part[:2] / hex_part[2:4] / hex_part
    
    def _lock_for(self, dest: Path) -> portalocker.Lock:
        return portalocker.Lock(str(dest.with_suffix(".lock")), "w", timeout=self.lock_timeout)
    
    def _existing_path(self, digest: str) -> Path:
        try:
            path = self.path_for(digest)
        except ValueError:
            raise NotFoundError(digest) from None
        if not path.exists():
            raise NotFoundError(digest)
        return path
    
    def begin_upload(self, digest: str) -> Optional[_PartialBlobWriter]:
        """
        Reserve digest for a new blob.
        
        Returns:
            Writer for the blob, or None if the blob already exists
            
        Raises:
            ValueError: If digest format is invalid
            FileExistsError: If another upload of digest is in progress
        """
        dest = self.path_for(digest)
        
        # Fast path: already stored
        if dest.exists():
            return None
        
        dest.parent.mkdir(parents=True, exist_ok=True)
        partial = dest.with_suffix(".partial")
        
        with self._lock_for(dest):
            # Re-check after acquiring lock
            if dest.exists():
                return None
            fh = open(partial, "xb")
        
        logger.debug("Reserved blob: %s", partial)
        return _PartialBlobWriter(self, partial, dest, fh)
    
    def fetch(self, digest: str) -> BinaryIO:
        """Open the blob file for reading."""
        return open(self._existing_path(digest), "rb")
    
    def delete(self, digest: str) -> None:
        """Remove the blob and any leftover partial upload."""
        try:
            dest = self.path_for(digest)
        except ValueError:
            return
        if not dest.parent.exists():
            return
        
        with self._lock_for(dest):
            for path in (dest, dest.with_suffix(".partial")):
                with contextlib.suppress(FileNotFoundError):
                    path.unlink()
                    logger.debug("Deleted %s", path)
    
    def stat(self, digest: str) -> File:
        """Read size from the filesystem and classify the blob header."""
        path = self._existing_path(digest)
        with open(path, "rb") as f:
            head = f.read(_SNIFF_WINDOW)
        return File(
            digest=digest,
            size=path.stat().st_size,
            content_type=detect_content_type(head),
        )
