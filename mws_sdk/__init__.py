"""Async client for Amazon Marketplace Web Service."""

from .errors import (
    ConfigurationError,
    InvalidParameterError,
    MissingParameterError,
    MWSError,
    ResponseParseError,
)
from .settings import MWSConfig, MWSSettings, get_settings

__all__ = [
    "ConfigurationError",
    "InvalidParameterError",
    "MissingParameterError",
    "MWSConfig",
    "MWSError",
    "MWSSettings",
    "ResponseParseError",
    "get_settings",
]
