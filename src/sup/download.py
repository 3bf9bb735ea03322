"""Streaming download out of a Storer."""

import logging
from typing import BinaryIO

from .errors import backend_errors
from .storage.base import Storer
from .streams import DEFAULT_CHUNK_SIZE, Sink, copy_stream, type_name

logger = logging.getLogger(__name__)


def download(
    storer: Storer,
    destination: Sink,
    digest: str,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Write the blob stored under ``digest`` to ``destination``.

    ``destination`` is closed on return if it has a ``close`` method.

    Raises:
        NotFoundError: If no blob is stored under digest
        BackendError: If the backend fails to open the blob
        Exception: Copy failures propagate with a note naming source and
            destination
    """
    try:
        _download(storer, destination, digest, chunk_size)
    finally:
        close = getattr(destination, "close", None)
        if close is not None:
            close()


def _download(storer: Storer, destination: Sink, digest: str, chunk_size: int) -> None:
    logger.debug("[sup] downloading %s from %s to %s",
                 digest, type_name(storer), type_name(destination))

    with backend_errors("fetch", digest):
        source: BinaryIO = storer.fetch(digest)

    try:
        copied = copy_stream(destination, source, chunk_size)
    except Exception as e:
        e.add_note(f"error copying from {type_name(source)} to {type_name(destination)}")
        raise
    finally:
        source.close()

    logger.debug("[sup] download complete: %s (%d bytes)", digest, copied)
