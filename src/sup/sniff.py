"""Content sniffing for uploads.

Classifies the media type of a stream from its leading magic-number bytes
while the stream is being written, so large uploads never need to be buffered
in full. The signature table itself comes from the ``filetype`` package.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

import filetype

from .errors import UnsupportedTypeError

logger = logging.getLogger(__name__)

# The minimum number of bytes needed to determine the MIME type.
MIN_BYTES_NEEDED = 261


def detect_content_type(data: bytes) -> str:
    """Classify raw bytes, returning an empty string when the type is unknown."""
    if not data:
        return ""
    return filetype.guess_mime(bytes(data)) or ""


def matches_type(data: bytes, mime: str) -> bool:
    """Check whether ``data`` carries the signature of ``mime``.

    Asks the matcher for that one type rather than taking the best guess, so
    content of a more specific subtype (APNG for PNG, EPUB for ZIP) still
    matches its parent type.
    """
    matcher = filetype.get_type(mime=mime)
    return matcher is not None and bool(matcher.match(data))


class ContentSniffer:
    """Write sink that only accepts content of the configured MIME types.

    Bytes are buffered until MIN_BYTES_NEEDED have arrived. At that point the
    prefix is classified once: on a match ``matched_type`` is set, the buffer
    is released and every later write is a no-op. On no match every write and
    ``close`` raise UnsupportedTypeError.

    ``close`` also raises UnsupportedTypeError when no type was ever matched,
    which usually means the stream was too short to classify.
    """

    def __init__(self, accepted_types: Iterable[str]):
        self.accepted_types: List[str] = list(accepted_types)
        self.matched_type: str = ""
        self._buf: Optional[bytearray] = bytearray()
        self._rejected = False

    @property
    def decided(self) -> bool:
        """True once the sniffer has either matched or rejected the content."""
        return bool(self.matched_type) or self._rejected

    def write(self, data: bytes) -> int:
        """Feed bytes to the sniffer.

        Args:
            data: Next chunk of the stream

        Returns:
            Number of bytes consumed (always ``len(data)``)

        Raises:
            UnsupportedTypeError: If the content was classified as a type
                outside ``accepted_types``
        """
        if self.matched_type:
            return len(data)
        if self._rejected:
            raise UnsupportedTypeError(self.accepted_types)

        self._buf.extend(data)
        if len(self._buf) < MIN_BYTES_NEEDED:
            return len(data)

        for mime in self.accepted_types:
            if matches_type(self._buf, mime):
                self.matched_type = mime
                self._buf = None
                logger.debug("Sniffed content type: %s", mime)
                return len(data)

        self._rejected = True
        logger.debug("Rejected content type %r, accepted: %s",
                     detect_content_type(self._buf), self.accepted_types)
        self._buf = None
        raise UnsupportedTypeError(self.accepted_types)

    def close(self) -> None:
        """Finish sniffing, raising UnsupportedTypeError if nothing matched."""
        if not self.matched_type:
            raise UnsupportedTypeError(self.accepted_types)


__all__ = [
    "ContentSniffer",
    "MIN_BYTES_NEEDED",
    "detect_content_type",
    "matches_type",
]
