"""Tests for the exceptions module."""

import pytest

from erwindb.exceptions import (
    ConfigurationError,
    ErwinDBError,
    SearchUnavailableError,
    StorageError,
)


class TestErwinDBError:
    """Test cases for ErwinDBError base exception."""

    def test_erwindb_error_creation(self) -> None:
        """Test creating ErwinDBError."""
        error = ErwinDBError("Test error message")
        assert str(error) == "Test error message"
        assert isinstance(error, Exception)

    def test_erwindb_error_inheritance(self) -> None:
        """Test that all custom exceptions inherit from ErwinDBError."""
        assert issubclass(ConfigurationError, ErwinDBError)
        assert issubclass(StorageError, ErwinDBError)
        assert issubclass(SearchUnavailableError, ErwinDBError)


class TestConfigurationError:
    """Test cases for ConfigurationError."""

    def test_configuration_error_creation(self) -> None:
        """Test creating ConfigurationError."""
        error = ConfigurationError("Invalid configuration")
        assert str(error) == "Invalid configuration"
        assert isinstance(error, ErwinDBError)

    def test_configuration_error_raise(self) -> None:
        """Test raising ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            raise ConfigurationError("Missing required field")
        assert "Missing required field" in str(exc_info.value)


class TestStorageError:
    """Test cases for StorageError."""

    def test_storage_error_with_path(self) -> None:
        """Test creating StorageError with a path."""
        error = StorageError("Database not found", path="/tmp/so.db")
        assert str(error) == "Database not found"
        assert error.path == "/tmp/so.db"

    def test_storage_error_without_path(self) -> None:
        """Test creating StorageError without a path."""
        error = StorageError("Generic storage error")
        assert error.path is None

    def test_storage_error_raise(self) -> None:
        """Test raising StorageError."""
        with pytest.raises(StorageError) as exc_info:
            raise StorageError("Locked", path="db.sqlite")
        assert exc_info.value.path == "db.sqlite"


class TestSearchUnavailableError:
    """Test cases for SearchUnavailableError."""

    def test_default_message(self) -> None:
        """Test SearchUnavailableError with default message."""
        error = SearchUnavailableError()
        assert "Semantic search not available" in str(error)

    def test_custom_message(self) -> None:
        """Test SearchUnavailableError with custom message."""
        error = SearchUnavailableError("Model failed to load")
        assert str(error) == "Model failed to load"


class TestExceptionCatchAll:
    """Test cases for catching exceptions."""

    def test_catch_all_erwindb_errors(self) -> None:
        """Test catching all ErwinDBError subclasses."""
        exceptions_to_test = [
            ConfigurationError("config error"),
            StorageError("storage error"),
            SearchUnavailableError(),
        ]

        for exception in exceptions_to_test:
            with pytest.raises(ErwinDBError):
                raise exception

    def test_exception_chain(self) -> None:
        """Test exception chaining."""
        try:
            try:
                raise SearchUnavailableError("No model")
            except SearchUnavailableError as e:
                raise ConfigurationError("Configuration issue") from e
        except ConfigurationError as final_error:
            assert isinstance(final_error.__cause__, SearchUnavailableError)
            assert "No model" in str(final_error.__cause__)
