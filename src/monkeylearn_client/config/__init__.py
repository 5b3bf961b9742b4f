"""Configuration management for the MonkeyLearn client.

This package provides configuration loading from environment variables and
.env files, validation, and error handling.
"""

from .exceptions import ConfigError, ConfigValidationError
from .settings import Settings
from .validation import ConfigValidator

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "Settings",
    "ConfigValidator",
]
