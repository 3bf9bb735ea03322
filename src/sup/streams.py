"""Stream plumbing shared by the upload and download pipelines."""

from __future__ import annotations

from typing import BinaryIO, Protocol, Sequence

from .hashing import new_hasher

DEFAULT_CHUNK_SIZE = 64 * 1024


class Sink(Protocol):
    """Anything bytes can be written to."""

    def write(self, data: bytes) -> int:
        ...


def _check_write(sink: Sink, written: object, expected: int) -> None:
    # Sinks that return None (or anything but a count) are trusted.
    if isinstance(written, int) and written < expected:
        raise OSError(f"short write to {type_name(sink)}: {written} of {expected} bytes")


class DigestWriter:
    """Write sink that accumulates a running SHA-256 of everything written."""

    def __init__(self):
        self._hasher = new_hasher()
        self.size = 0

    def write(self, data: bytes) -> int:
        self._hasher.update(data)
        self.size += len(data)
        return len(data)

    def close(self) -> None:
        pass

    def hexdigest(self) -> str:
        """Return the lowercase hex digest of the bytes written so far."""
        return self._hasher.hexdigest()


class FanOutWriter:
    """Ordered list of sinks that all receive every chunk in one pass.

    Each chunk is written to the sinks in order. The first sink that raises
    stops the write: later sinks never see that chunk. A sink that reports
    fewer bytes than it was given raises OSError the same way. ``close``
    finalizes the sinks in the same order and stops at the first failure.
    """

    def __init__(self, sinks: Sequence[Sink]):
        self.sinks = list(sinks)

    def write(self, data: bytes) -> int:
        for sink in self.sinks:
            _check_write(sink, sink.write(data), len(data))
        return len(data)

    def close(self) -> None:
        for sink in self.sinks:
            close = getattr(sink, "close", None)
            if close is not None:
                close()


def copy_stream(dst: Sink, src: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Copy everything from ``src`` to ``dst``.

    Args:
        dst: Destination sink
        src: Readable binary stream
        chunk_size: Maximum bytes requested per read

    Returns:
        Total number of bytes copied

    Raises:
        ValueError: If chunk_size is not positive
        OSError: If ``dst`` accepts fewer bytes than it was given
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    copied = 0
    for chunk in iter(lambda: src.read(chunk_size), b""):
        _check_write(dst, dst.write(chunk), len(chunk))
        copied += len(chunk)
    return copied


def type_name(obj: object) -> str:
    """Qualified type name of ``obj`` for diagnostics."""
    cls = type(obj)
    return f"{cls.__module__}.{cls.__qualname__}"


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DigestWriter",
    "FanOutWriter",
    "Sink",
    "copy_stream",
    "type_name",
]
