"""Utilities: exception hierarchy and logging setup"""

from .exceptions import (
    AppInitError,
    BootstrapError,
    ConfigurationError,
    ErrorCategory,
    ErrorSeverity,
    InitializationTimeoutError,
    wrap_exception,
)
from .logger import is_dev_mode, setup_logging

__all__ = [
    "AppInitError",
    "BootstrapError",
    "ConfigurationError",
    "ErrorCategory",
    "ErrorSeverity",
    "InitializationTimeoutError",
    "wrap_exception",
    "is_dev_mode",
    "setup_logging",
]
