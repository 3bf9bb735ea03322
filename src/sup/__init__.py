"""sup: content-addressed blob storage with streaming verification."""

import importlib.metadata as importlib_metadata

from .download import download
from .errors import (
    BackendError,
    DigestMismatchError,
    NotFoundError,
    SupError,
    UnsupportedTypeError,
)
from .models import File, UploadOptions
from .storage import FilesystemStorer, InMemoryStorer, Storer
from .upload import upload

try:
    __version__ = importlib_metadata.version("sup")
except importlib_metadata.PackageNotFoundError:
    __version__ = "0.0.0+unknown"

__all__ = [
    "BackendError",
    "DigestMismatchError",
    "File",
    "FilesystemStorer",
    "InMemoryStorer",
    "NotFoundError",
    "Storer",
    "SupError",
    "UnsupportedTypeError",
    "UploadOptions",
    "download",
    "upload",
]
