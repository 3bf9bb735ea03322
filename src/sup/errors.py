"""Custom exceptions for sup.

This module defines typed exceptions for the upload and download pipelines
so callers can tell a missing blob from a rejected or corrupted upload.
"""

from contextlib import contextmanager


class SupError(RuntimeError):
    """Base class for all sup errors."""
    pass


class NotFoundError(SupError):
    """No blob is stored under the requested digest."""

    def __init__(self, digest: str):
        self.digest = digest
        super().__init__(f"File not found: {digest}")


class UnsupportedTypeError(SupError):
    """Sniffed content did not match any accepted type.

    Also raised when the stream ended before enough bytes were seen to
    classify it.
    """

    def __init__(self, accepted_types: list | None = None):
        self.accepted_types = list(accepted_types or [])
        if self.accepted_types:
            super().__init__(
                f"Unsupported file: content is not one of {', '.join(self.accepted_types)}"
            )
        else:
            super().__init__("Unsupported file")


# Integrity Errors
class IntegrityError(SupError):
    """Base class for data integrity errors."""
    pass


class DigestMismatchError(IntegrityError):
    """Claimed digest doesn't match the uploaded content."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Claimed SHA did not match calculated SHA\n"
            f"  Claimed:    {expected}\n"
            f"  Calculated: {actual}"
        )


# Storage Errors
class StorageError(SupError):
    """Base class for storage backend errors."""
    pass


class BackendError(StorageError):
    """A storage backend operation failed.

    The original exception is kept as ``__cause__`` (and ``cause``) so callers
    can still inspect what went wrong underneath.
    """

    def __init__(self, operation: str, digest: str, cause: BaseException | None = None):
        self.operation = operation
        self.digest = digest
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Storage backend failed to {operation} {digest}{detail}")


# Configuration Errors
class ConfigError(SupError):
    """Configuration file could not be loaded or is invalid."""
    pass


@contextmanager
def backend_errors(operation: str, digest: str):
    """Wrap unexpected backend exceptions in BackendError.

    SupError subclasses raised by a backend (NotFoundError in particular) pass
    through unchanged.
    """
    try:
        yield
    except SupError:
        raise
    except Exception as e:
        raise BackendError(operation, digest, e) from e
