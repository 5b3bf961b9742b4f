"""Configuration-related exceptions for the MonkeyLearn client."""

from __future__ import annotations


class ConfigError(Exception):
    """Base exception for configuration-related errors.

    Attributes:
        config_key: Name of the offending setting, e.g. 'MONKEYLEARN_RPM'.
    """

    def __init__(self, message: str, config_key: str | None = None) -> None:
        super().__init__(message)
        self.config_key = config_key

    def __str__(self) -> str:
        message = super().__str__()
        if self.config_key:
            return f'{message} (setting: {self.config_key})'
        return message


class ConfigValidationError(ConfigError):
    """Raised when required settings are missing or out of range.

    Attributes:
        missing_keys: Every required setting found empty, in declaration order.
    """

    def __init__(
        self,
        message: str,
        missing_keys: list[str] | None = None,
        config_key: str | None = None,
    ) -> None:
        super().__init__(message, config_key)
        self.missing_keys = missing_keys or []
