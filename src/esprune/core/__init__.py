"""
Configuration, logging and error types shared by the pruner.
"""
from .config import AppConfig, ConfigManager, load_config
from .errors import (
    ApiError,
    ConfigError,
    CredentialError,
    DecodeError,
    EsPruneError,
    TransportError,
)

__all__ = [
    'AppConfig',
    'ConfigManager',
    'load_config',
    'ApiError',
    'ConfigError',
    'CredentialError',
    'DecodeError',
    'EsPruneError',
    'TransportError',
]
