"""Streaming upload into a Storer.

The source is read exactly once. Every chunk is fanned out, in order, to an
optional content sniffer, a SHA-256 accumulator and the backend's writer, and
the claimed digest is checked only after the whole stream has been stored.
"""

import logging
from typing import BinaryIO, Optional, Tuple

from .errors import DigestMismatchError, backend_errors
from .models import File, UploadOptions
from .sniff import ContentSniffer
from .storage.base import Storer
from .streams import DEFAULT_CHUNK_SIZE, DigestWriter, FanOutWriter, copy_stream, type_name

logger = logging.getLogger(__name__)


def upload(
    storer: Storer,
    source: BinaryIO,
    digest: str,
    options: Optional[UploadOptions] = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Tuple[File, bool]:
    """Stream ``source`` into ``storer`` under the claimed ``digest``.

    If a blob already exists under digest, nothing is read or written and the
    stored File is returned with ``created=False``. Otherwise the stream is
    written and its File returned with ``created=True``.

    If ``options.accepted_types`` is set, the content is sniffed and only
    accepted when its MIME type is one of them.

    ``source`` is closed on return if it has a ``close`` method.

    Args:
        storer: Storage backend
        source: Readable binary stream
        digest: Claimed lowercase sha256 hex of the content
        options: Optional upload behaviour
        chunk_size: Bytes requested per read

    Returns:
        Tuple of (File, created)

    Raises:
        BackendError: If the backend fails to start the upload, stat an
            existing blob, or delete a mismatched one
        UnsupportedTypeError: If the content type is not accepted
        DigestMismatchError: If the content does not hash to digest; the
            written blob is deleted first
        Exception: Source read and backend write failures propagate with a
            note naming the source and storer
    """
    try:
        return _upload(storer, source, digest, options or UploadOptions(), chunk_size)
    finally:
        close = getattr(source, "close", None)
        if close is not None:
            close()


def _upload(
    storer: Storer,
    source: BinaryIO,
    digest: str,
    options: UploadOptions,
    chunk_size: int,
) -> Tuple[File, bool]:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    storer_name = type_name(storer)
    source_name = type_name(source)

    with backend_errors("begin upload", digest):
        writer = storer.begin_upload(digest)

    if writer is None:
        logger.debug("[sup] %s already exists in %s, not re-uploading", digest, storer_name)
        with backend_errors("stat", digest):
            return storer.stat(digest), False

    sinks = []
    sniffer = None
    if options.accepted_types:
        # only accept files of types we can support
        sniffer = ContentSniffer(options.accepted_types)
        sinks.append(sniffer)
    hasher = DigestWriter()
    sinks.append(hasher)
    sinks.append(writer)
    fanout = FanOutWriter(sinks)

    logger.debug("[sup] starting upload: storer=%s source=%s claimed_digest=%s",
                 storer_name, source_name, digest)
    try:
        size = copy_stream(fanout, source, chunk_size)
        fanout.close()
    except Exception as e:
        e.add_note(f"error uploading {source_name} to {storer_name} as {digest}")
        abort = getattr(writer, "abort", None)
        if abort is not None:
            abort()
        raise

    actual = hasher.hexdigest()
    logger.debug("[sup] upload written: size=%d real_digest=%s", size, actual)

    if actual != digest:
        logger.debug("[sup] claimed digest %s did not match file, deleting", digest)
        with backend_errors("delete", digest):
            storer.delete(digest)
        raise DigestMismatchError(digest, actual)

    logger.debug("[sup] completed upload of %s", digest)
    content_type = sniffer.matched_type if sniffer is not None else ""
    return File(digest=digest, size=size, content_type=content_type), True
