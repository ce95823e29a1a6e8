"""Configuration loading for mailwright.

Examples:
    >>> from mailwright.config import get_config
    >>> get_config().mail.charset  # doctest: +SKIP
    'UTF-8'
"""

from mailwright.config.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigFormatError,
    MailwrightError,
)
from mailwright.config.loader import clear_config, get_config, load_config, load_from_file

__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "MailwrightError",
    "clear_config",
    "get_config",
    "load_config",
    "load_from_file",
]
