"""
Custom exception classes for the Jira field mapper.
"""

from __future__ import annotations


class FieldMappingError(Exception):
    """Base exception for field mapping errors."""


class InvalidArgumentError(FieldMappingError, ValueError):
    """Raised when a mapper is called with an argument it cannot handle."""


class MissingArgumentError(InvalidArgumentError):
    """Raised when a required argument is None."""


class ConfigError(FieldMappingError):
    """Raised when the mapping configuration is malformed."""


class ResourceNotFoundError(FieldMappingError):
    """Raised when an embedded resource cannot be read."""
