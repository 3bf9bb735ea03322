"""Storage backends for sup."""

from .base import BlobWriter, Storer
from .factory import make_storer
from .fs import FilesystemStorer
from .memory import InMemoryStorer

__all__ = ["BlobWriter", "FilesystemStorer", "InMemoryStorer", "Storer", "make_storer"]
