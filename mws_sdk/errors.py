"""
MWS SDK errors.

Every error the SDK raises on its own derives from MWSError. Network
failures are left as the aiohttp exceptions that caused them.
"""
from typing import Iterable, Optional


class MWSError(Exception):
    """Base class for SDK errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def as_dict(self) -> dict[str, str]:
        """Error in the shape callers of the callback API inspect."""
        return {"Error": self.message}


class ConfigurationError(MWSError):
    """Configuration is missing a field or has an empty value."""


class MissingParameterError(MWSError):
    """A required operation parameter was not supplied."""

    def __init__(self, operation: str, missing: Iterable[str]) -> None:
        self.operation = operation
        self.missing = list(missing)
        super().__init__(
            f"{operation} requires parameter(s): {', '.join(self.missing)}"
        )


class InvalidParameterError(MWSError):
    """A parameter was supplied that the request cannot carry."""


class ResponseParseError(MWSError):
    """
    The response body could not be parsed as XML.

    The raw body is kept on the error so the caller can still inspect
    whatever Amazon sent back.
    """

    def __init__(self, message: str, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.body = body
