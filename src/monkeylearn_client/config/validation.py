"""Configuration validation for the MonkeyLearn client."""

from __future__ import annotations

import logging
from typing import Any

from .exceptions import ConfigValidationError
from .settings import Settings


class ConfigValidator:
    """Validates configuration settings before a run."""

    _SUPPORTED_OPERATIONS = {'classify', 'extract'}
    _POSITIVE_NUMBERS = {
        'MONKEYLEARN_RPM': 'requests per minute',
        'BATCH_SIZE': 'batch size',
        'REQUEST_TIMEOUT': 'request timeout',
    }

    @staticmethod
    def effective(key: str, overrides: dict[str, Any]) -> Any:
        """Return the override for key if given, else the Settings value."""
        value = overrides.get(key)
        return getattr(Settings, key) if value is None else value

    @staticmethod
    def validate_required(**overrides: Any) -> None:
        """Validate that every required configuration value is present.

        Args:
            **overrides: Values taking precedence over Settings, keyed by
                setting name (e.g. command line arguments).

        Raises:
            ConfigValidationError: Listing every missing key.
        """
        missing_keys = [
            key for key in Settings.get_required_configs()
            if not ConfigValidator.effective(key, overrides)
        ]

        if missing_keys:
            raise ConfigValidationError(
                f'Missing required configuration: {", ".join(missing_keys)}. '
                'Please set these in your environment variables or .env file.',
                missing_keys=missing_keys
            )

    @staticmethod
    def validate_values(**overrides: Any) -> None:
        """Validate ranges and choices of the configuration values.

        Raises:
            ConfigValidationError: If any value is out of range.
        """
        operation = ConfigValidator.effective('MONKEYLEARN_OPERATION', overrides)
        if str(operation).lower() not in ConfigValidator._SUPPORTED_OPERATIONS:
            raise ConfigValidationError(
                f'Unsupported operation: {operation}. '
                f'Supported operations: {", ".join(sorted(ConfigValidator._SUPPORTED_OPERATIONS))}',
                config_key='MONKEYLEARN_OPERATION'
            )

        for key, description in ConfigValidator._POSITIVE_NUMBERS.items():
            value = ConfigValidator.effective(key, overrides)
            if value is None or value <= 0:
                raise ConfigValidationError(
                    f'{description.capitalize()} must be > 0, got {value}',
                    config_key=key
                )

        max_in_flight = ConfigValidator.effective('MAX_IN_FLIGHT', overrides)
        if max_in_flight is not None and max_in_flight <= 0:
            raise ConfigValidationError(
                f'Max in-flight requests must be > 0, got {max_in_flight}',
                config_key='MAX_IN_FLIGHT'
            )

        base_url = str(ConfigValidator.effective('MONKEYLEARN_BASE_URL', overrides))
        if not base_url.startswith(('http://', 'https://')):
            raise ConfigValidationError(
                f'Base URL must be an http(s) URL, got {base_url}',
                config_key='MONKEYLEARN_BASE_URL'
            )

    @staticmethod
    def validate_all(**overrides: Any) -> None:
        """Run every configuration check.

        Raises:
            ConfigValidationError: If any check fails.
        """
        ConfigValidator.validate_required(**overrides)
        ConfigValidator.validate_values(**overrides)
        logging.info('Configuration validation passed')
