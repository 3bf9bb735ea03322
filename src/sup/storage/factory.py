"""Factory for creating storage backends."""

from pathlib import Path

from ..config import SupConfig
from .base import Storer
from .fs import FilesystemStorer
from .memory import InMemoryStorer


def make_storer(config: SupConfig) -> Storer:
    """
    Create a storage backend from configuration.
    
    Args:
        config: Loaded sup configuration
        
    Returns:
        Storer instance
        
    Raises:
        ValueError: If configuration is invalid
        NotImplementedError: If backend is not supported
    """
    if config.backend == "memory":
        return InMemoryStorer()
    
    elif config.backend == "fs":
        if not config.root:
            raise ValueError("root (directory path) required for filesystem storage")
        return FilesystemStorer(Path(config.root).expanduser())
    
    else:
        raise NotImplementedError(f"Backend {config.backend} not supported")
