"""Configuration settings for the MonkeyLearn batch client.

This module provides configuration management with environment variables
loading (including a local .env file) and typed defaults.
"""

import logging
import os

from dotenv import load_dotenv

from .exceptions import ConfigError

# Load environment variables from .env file
load_dotenv()


def _get_int(name: str, default: int | None) -> int | None:
    """Read an integer environment variable, falling back to default."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logging.warning('Invalid integer for %s: %r, using default %s', name, raw, default)
        return default


def _get_float(name: str, default: float) -> float:
    """Read a float environment variable, falling back to default."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logging.warning('Invalid number for %s: %r, using default %s', name, raw, default)
        return default


class Settings:
    """Configuration settings for the MonkeyLearn batch client.

    Attributes:
        MONKEYLEARN_TOKEN: API authentication token.
        MONKEYLEARN_BASE_URL: Base URL of the API server.
        MONKEYLEARN_MODEL: Default classifier or extractor identifier.
        MONKEYLEARN_OPERATION: Default operation, 'classify' or 'extract'.
        MONKEYLEARN_RPM: Maximum requests per minute; keep it below the API limit.
        BATCH_SIZE: Documents per request.
        MAX_IN_FLIGHT: Maximum concurrent requests, None for unbounded.
        REQUEST_TIMEOUT: Per-request timeout in seconds.
        INPUT_FILE: JSON file with the documents to process.
        OUTPUT_FILE: Optional JSON lines file for the results.
    """

    # API Configuration
    MONKEYLEARN_TOKEN: str | None = os.getenv('MONKEYLEARN_TOKEN')
    MONKEYLEARN_BASE_URL: str = os.getenv('MONKEYLEARN_BASE_URL', 'https://api.monkeylearn.com')

    # Model Configuration
    MONKEYLEARN_MODEL: str | None = os.getenv('MONKEYLEARN_MODEL')
    MONKEYLEARN_OPERATION: str = os.getenv('MONKEYLEARN_OPERATION', 'classify')

    # Throughput Configuration
    MONKEYLEARN_RPM: int = _get_int('MONKEYLEARN_RPM', 120)
    BATCH_SIZE: int = _get_int('BATCH_SIZE', 1)
    MAX_IN_FLIGHT: int | None = _get_int('MAX_IN_FLIGHT', None)
    REQUEST_TIMEOUT: float = _get_float('REQUEST_TIMEOUT', 60.0)

    # File I/O Configuration
    INPUT_FILE: str = os.getenv('INPUT_FILE', 'data.json')
    OUTPUT_FILE: str | None = os.getenv('OUTPUT_FILE')

    @classmethod
    def request_interval(cls, rpm: int | None = None) -> float:
        """Return the pacing interval in seconds for a requests-per-minute rate.

        Args:
            rpm: Requests per minute; defaults to MONKEYLEARN_RPM.

        Raises:
            ConfigError: If the rate is not positive.
        """
        rate = cls.MONKEYLEARN_RPM if rpm is None else rpm
        if not rate or rate <= 0:
            raise ConfigError(
                f'Requests per minute must be > 0, got {rate}',
                config_key='MONKEYLEARN_RPM',
            )
        return 60.0 / rate

    @classmethod
    def get_required_configs(cls) -> dict[str, str | None]:
        """Get the configuration values every run requires.

        Returns:
            Dictionary of required configuration keys and their values.
        """
        return {
            'MONKEYLEARN_TOKEN': cls.MONKEYLEARN_TOKEN,
            'MONKEYLEARN_BASE_URL': cls.MONKEYLEARN_BASE_URL,
            'MONKEYLEARN_MODEL': cls.MONKEYLEARN_MODEL,
        }
