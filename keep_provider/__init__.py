"""Manage Keep alerting resources as declarative configuration."""

from keep_provider.client import KeepClient
from keep_provider.errors import (
    APIError,
    ConfigurationError,
    DecodeError,
    KeepProviderError,
    NotFoundError,
    ReplacementRequiredError,
    ResourceValidationError,
    TransportError,
)
from keep_provider.registry import UNKNOWN, KeepProvider

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "ConfigurationError",
    "DecodeError",
    "KeepClient",
    "KeepProvider",
    "KeepProviderError",
    "NotFoundError",
    "ReplacementRequiredError",
    "ResourceValidationError",
    "TransportError",
    "UNKNOWN",
]
