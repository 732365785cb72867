"""
Error types raised while pruning indices.
"""
from typing import Any, Optional


class EsPruneError(Exception):
    """Base class for all esprune errors."""


class ConfigError(EsPruneError):
    """A required configuration value is missing or invalid."""

    def __init__(self, message: str, exit_code: int = 100):
        super().__init__(message)
        self.exit_code = exit_code


class CredentialError(EsPruneError):
    """AWS credentials could not be resolved or used for signing."""


class TransportError(EsPruneError):
    """The request never produced an HTTP response (refused, timeout, DNS)."""


class ApiError(EsPruneError):
    """The cluster answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: Optional[Any] = None):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class DecodeError(EsPruneError):
    """The response body was not valid JSON."""
