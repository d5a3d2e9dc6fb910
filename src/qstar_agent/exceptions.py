"""Custom exceptions for the QStar extraction engine."""

from __future__ import annotations


class QStarError(Exception):
    """Base exception for QStar extraction errors."""

    def __init__(self, message: str, line: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            line: Optional input line that caused the error.

        """
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        """Return string representation."""
        if self.line is not None:
            return f"{self.message} (line: {self.line!r})"
        return self.message


class NoMatchError(QStarError):
    """Exception raised when a field matcher does not recognise a line."""

    def __init__(self, message: str = "No match", line: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            line: The line the matcher was applied to.

        """
        super().__init__(message, line)


class MalformedInputError(QStarError):
    """Exception raised when a labelled value fails type conversion.

    The label was recognised, so the line belongs to a required field and
    the enclosing filesystem cannot be reported reliably.
    """

    def __init__(
        self,
        message: str = "Malformed input",
        line: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            line: The offending line.

        """
        super().__init__(message, line)


class MissingRequiredError(QStarError):
    """Exception raised when page size or replica count is absent."""

    def __init__(self, message: str = "Missing required field") -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.

        """
        super().__init__(message)


class ReplicaIndexError(QStarError):
    """Exception raised when a replica header is outside the declared count."""

    def __init__(
        self,
        message: str = "Replica out of range",
        line: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            line: The replica header line.

        """
        super().__init__(message, line)


class SourceUnavailableError(QStarError):
    """Exception raised when a command fails or a file cannot be read."""

    def __init__(self, message: str = "Source unavailable") -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.

        """
        super().__init__(message)


class TimestampParseError(QStarError):
    """Exception raised when no log line in a window carries a timestamp."""

    def __init__(
        self,
        message: str = "Failed to read date from log",
        line: str | None = None,
        failures: int = 0,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            line: The first line whose prefix failed to parse.
            failures: Number of prefixes that failed to parse.

        """
        super().__init__(message, line)
        self.failures = failures


class ConfigError(QStarError, ValueError):
    """Exception raised when the environment configuration is invalid."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.

        """
        super().__init__(message)
