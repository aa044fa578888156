"""
Custom exceptions for batch file parsing and ledger processing.
"""
from typing import Any, Dict, Optional


class BatchLedgerException(Exception):
    """Base exception for all batch ledger errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ParsingError(BatchLedgerException):
    """Raised when a batch file cannot be parsed."""

    def __init__(
        self,
        message: str,
        expected: Optional[str] = None,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize parsing error.

        Args:
            message: Error message
            expected: Pattern the offending line was expected to match
            line_number: 0-based index of the offending line, if known
            details: Additional error details
        """
        details = dict(details or {})
        if expected is not None:
            details["expected"] = expected
        if line_number is not None:
            details["line_number"] = line_number
        super().__init__(message, details)
        self.expected = expected
        self.line_number = line_number

    def at_line(self, line_number: int, line: Optional[str] = None) -> "ParsingError":
        """Attach the 0-based position (and content) of the offending line."""
        self.line_number = line_number
        self.details["line_number"] = line_number
        if line is not None:
            self.details["line"] = line
        return self


class FormatError(ParsingError):
    """Raised when a line does not match the structure expected at its position."""
    pass


class ValidationError(ParsingError):
    """Raised when a line has the right prefix but an invalid value."""
    pass


class FileProcessingError(BatchLedgerException):
    """Raised when an input file cannot be read or decoded."""
    pass


class ExportError(BatchLedgerException):
    """Raised when JSON export fails."""
    pass


class ConfigurationError(BatchLedgerException):
    """Raised when configuration is invalid."""
    pass


class DataNotFoundError(BatchLedgerException):
    """Raised when required data is not found."""
    pass
