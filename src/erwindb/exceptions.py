"""Custom exceptions for erwindb."""


class ErwinDBError(Exception):
    """Base exception for all erwindb errors."""

    pass


class ConfigurationError(ErwinDBError):
    """Raised when there's an error with configuration."""

    pass


class StorageError(ErwinDBError):
    """Raised when the question database cannot be opened or read."""

    def __init__(self, message: str, path: str | None = None) -> None:
        """Initialize StorageError.

        Args:
            message: Error message
            path: Path of the database file if applicable
        """
        super().__init__(message)
        self.path = path


class SearchUnavailableError(ErwinDBError):
    """Raised when a search backend is not configured or cannot be loaded."""

    def __init__(
        self, message: str = "Semantic search not available. No embedding model configured."
    ) -> None:
        """Initialize SearchUnavailableError.

        Args:
            message: Error message
        """
        super().__init__(message)
