"""Allow running as ``python -m sup``."""

from .cli import main

if __name__ == "__main__":
    main()
