"""Main module for erwindb package."""

from .exceptions import (
    ConfigurationError,
    ErwinDBError,
    SearchUnavailableError,
    StorageError,
)
from .main import main

__all__: list[str] = [
    "ConfigurationError",
    "ErwinDBError",
    "SearchUnavailableError",
    "StorageError",
    "main",
]

if __name__ == "__main__":
    main()  # pragma: no cover
