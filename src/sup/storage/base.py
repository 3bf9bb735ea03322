"""Base protocol for blob storage implementations."""

from typing import BinaryIO, Optional, Protocol

from ..models import File


class BlobWriter(Protocol):
    """Sink for the bytes of a newly reserved blob. ``close`` finalizes it.

    Writers holding OS resources may also define ``abort()``, called instead of
    ``close`` when an upload fails. It releases those resources and leaves the
    reserved blob as it is.
    """

    def write(self, data: bytes) -> int:
        ...

    def close(self) -> None:
        ...


class Storer(Protocol):
    """
    Protocol for blob storage backends.
    
    All implementations must provide begin_upload/fetch/delete/stat, keyed by
    content digest. Digest verification is the caller's responsibility, not
    the store's.
    """
    
    def begin_upload(self, digest: str) -> Optional[BlobWriter]:
        """
        Reserve a digest for a new blob.
        
        Existence check and reservation must be atomic, so two callers can
        never both receive a writer for the same digest.
        
        Args:
            digest: Content digest (lowercase sha256 hex)
            
        Returns:
            A writer for the blob bytes, or None if a blob already exists
        """
        ...
    
    def fetch(self, digest: str) -> BinaryIO:
        """
        Open a stored blob for reading.
        
        Args:
            digest: Content digest
            
        Returns:
            Readable binary stream; the caller closes it
            
        Raises:
            NotFoundError: If no blob is stored under digest
        """
        ...
    
    def delete(self, digest: str) -> None:
        """
        Remove a blob. Deleting an absent digest is a no-op.
        
        Args:
            digest: Content digest
        """
        ...
    
    def stat(self, digest: str) -> File:
        """
        Describe a stored blob without returning its bytes.
        
        Size and content type are derived from the stored blob.
        
        Args:
            digest: Content digest
            
        Returns:
            File metadata
            
        Raises:
            NotFoundError: If no blob is stored under digest
        """
        ...
