"""
Exception classes for vappnet.

This module defines custom exceptions used throughout the vappnet library.
"""

from typing import Optional


class VAppNetError(Exception):
    """
    Base exception class for all vappnet errors.

    All custom exceptions in the library should inherit from this class.
    """
    pass

class ConfigError(VAppNetError):
    """Base class for configuration-related errors."""
    pass

class DocumentStructureError(ConfigError):
    """Exception raised when a network configuration document lacks a required node."""
    pass

class ValidationError(VAppNetError):
    """Exception raised when caller input fails validation."""
    pass

class ParseError(VAppNetError):
    """Exception raised when parsing XML fails."""
    pass

class XPathError(VAppNetError):
    """Exception raised when an XPath operation fails."""
    pass

class SelectionError(VAppNetError):
    """Base class for errors raised when a selection matches nothing."""
    pass

class NetworkNotFoundError(SelectionError):
    """Exception raised when a named vApp network is not found."""
    pass

class StatePreconditionError(VAppNetError):
    """Exception raised when the network is not in the state an operation requires."""

    def __init__(self, field: str, expected: str, actual: Optional[str] = None):
        """
        Initialize a StatePreconditionError.

        Args:
            field: Name of the field that failed the check (FenceMode, NatType)
            expected: Value the field must have
            actual: Value found in the document (optional)
        """
        super().__init__(
            f"Invalid request because {field} must be set to {expected} "
            f"(found {actual or 'nothing'})."
        )
        self.field = field
        self.expected = expected
        self.actual = actual

class TransportError(VAppNetError):
    """Exception raised when a request to the remote API fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        """
        Initialize a TransportError.

        Args:
            message: Error message
            status_code: HTTP status code of the failed response (optional)
        """
        super().__init__(message)
        self.status_code = status_code

class TaskReferenceError(VAppNetError):
    """Exception raised when a response carries no reference to an asynchronous task."""
    pass
