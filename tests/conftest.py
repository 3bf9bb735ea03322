"""Shared test fixtures and utilities."""

import hashlib
import io

import pytest

from sup.storage import FilesystemStorer, InMemoryStorer
from sup.sniff import MIN_BYTES_NEEDED


# Backend constructors the shared conformance suite runs against. Each takes
# the per-test tmp_path.
STORER_FACTORIES = [
    pytest.param(lambda tmp_path: InMemoryStorer(), id="memory"),
    pytest.param(lambda tmp_path: FilesystemStorer(tmp_path / "blobs"), id="fs"),
]


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class TrackingSource(io.BytesIO):
    """BytesIO that records reads and close calls."""

    def __init__(self, data: bytes = b""):
        super().__init__(data)
        self.reads = 0
        self.close_calls = 0

    def read(self, size=-1):
        self.reads += 1
        return super().read(size)

    def close(self):
        self.close_calls += 1
        super().close()


class CollectingSink:
    """Destination that keeps written bytes readable after close."""

    def __init__(self):
        self.data = bytearray()
        self.close_calls = 0

    def write(self, data: bytes) -> int:
        self.data.extend(data)
        return len(data)

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture(params=STORER_FACTORIES)
def storer(request, tmp_path):
    """Each backend in STORER_FACTORIES, fresh per test."""
    return request.param(tmp_path)


@pytest.fixture
def memory_storer():
    return InMemoryStorer()


@pytest.fixture
def gif_bytes():
    """Minimal GIF header padded past the sniffing threshold."""
    return b"GIF89a" + b"\x01\x00\x01\x00\x80\x00\x00" + b"\x00" * MIN_BYTES_NEEDED


@pytest.fixture
def jpeg_bytes():
    """JPEG SOI/APP0 header padded past the sniffing threshold."""
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * MIN_BYTES_NEEDED


@pytest.fixture
def text_bytes(gif_bytes):
    """Plain text the same size as gif_bytes."""
    return (b"just some plain text. " * 50)[: len(gif_bytes)]


@pytest.fixture
def apng_bytes():
    """PNG signature, IHDR chunk, then an acTL chunk marking it animated."""
    ihdr = (13).to_bytes(4, "big") + b"IHDR" + b"\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00" + b"\x00" * 4
    actl = (8).to_bytes(4, "big") + b"acTL" + b"\x00\x00\x00\x01\x00\x00\x00\x00" + b"\x00" * 4
    return b"\x89PNG\r\n\x1a\n" + ihdr + actl + b"\x00" * MIN_BYTES_NEEDED


@pytest.fixture
def epub_bytes():
    """ZIP local header whose first entry is the EPUB mimetype file."""
    header = b"PK\x03\x04" + b"\x00" * 26
    return header + b"mimetypeapplication/epub+zip" + b"\x00" * MIN_BYTES_NEEDED
