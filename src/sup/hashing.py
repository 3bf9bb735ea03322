"""Hashing utilities for content digests.

Digests are bare lowercase SHA-256 hex strings, used as the storage key for
every blob.
"""

import hashlib
import re
from pathlib import Path
from typing import BinaryIO, Union

_HEX64 = re.compile(r"^[0-9a-f]{64}$")

CHUNK_SIZE = 8192


def new_hasher():
    """Return a fresh hash object for the digest algorithm in use."""
    return hashlib.sha256()


def compute_digest(data: Union[bytes, BinaryIO, Path]) -> str:
    """Compute the SHA256 hex digest of bytes, a binary stream, or a file.

    Args:
        data: Raw bytes, a readable binary stream, or a path to a file

    Returns:
        64-character lowercase hex digest
    """
    sha256 = new_hasher()
    if isinstance(data, (bytes, bytearray, memoryview)):
        sha256.update(data)
        return sha256.hexdigest()

    if isinstance(data, Path):
        with data.open("rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                sha256.update(chunk)
        return sha256.hexdigest()

    for chunk in iter(lambda: data.read(CHUNK_SIZE), b""):
        sha256.update(chunk)
    return sha256.hexdigest()


def validate_digest(digest: str) -> str:
    """Validate a digest string before using it as a storage key.

    Args:
        digest: Hex digest

    Returns:
        The digest, unchanged

    Raises:
        ValueError: If the digest is not 64 lowercase hex characters

    Security:
        Prevents path traversal by validating hex format before using in paths.
    """
    if not isinstance(digest, str) or not _HEX64.fullmatch(digest):
        raise ValueError(f"Invalid sha256 hex (must be 64 lowercase hex chars): {digest!r}")
    return digest


__all__ = [
    "compute_digest",
    "new_hasher",
    "validate_digest",
]
