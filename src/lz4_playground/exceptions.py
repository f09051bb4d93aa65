"""
Custom exceptions for the LZ4 Playground session engine.
"""

from typing import Any, Dict, Optional


class PlaygroundError(Exception):
    """
    Base class for all LZ4 Playground specific errors.

    Attributes:
        message (str): A human-readable description of the error.
        details (Dict[str, Any]): Additional context about the error.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else {}

    def __str__(self):
        if self.details:
            return f"{super().__str__()} (Details: {self.details})"
        return super().__str__()


class CodecError(PlaygroundError):
    """Base class for errors related to codec loading and execution."""
    pass


class CodecLoadError(CodecError):
    """Raised by a resolver when a single codec version cannot be loaded."""
    pass


class CodecUnavailable(CodecError):
    """
    Raised when neither the requested codec version nor the fallback version
    could be loaded. ``version`` is always the originally requested version.
    """

    def __init__(self, version: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Codec version {version} is unavailable", details)
        self.version = version


class CodecExecutionFailed(CodecError):
    """
    Raised when the underlying compress/decompress call fails.

    This usually means the payload is not valid for the operation, e.g.
    corrupted compressed input, rather than a fault in the engine.
    """
    pass


class InvalidEncoding(PlaygroundError):
    """Raised when text flagged as base64 cannot be decoded."""
    pass


class MalformedShareToken(PlaygroundError):
    """
    Describes a share token that could not be parsed.

    The share codec hands this back as a value instead of raising it, since a
    shared link may have been edited by hand.
    """
    pass


class PersistenceReadFailure(PlaygroundError):
    """Stored text is not valid structured data; recovered by resetting."""
    pass


class ConfigurationError(PlaygroundError):
    """Raised for general configuration issues."""
    pass
