"""Base exception and configuration errors for mailwright.

Exception hierarchy::

    MailwrightError
        ConfigError (base for all configuration errors)
            ConfigFileNotFoundError (explicit file missing)
            ConfigFormatError (file cannot be parsed, also ValueError)
"""

from __future__ import annotations


class MailwrightError(Exception):
    """Root of every exception raised by mailwright."""


class ConfigError(MailwrightError):
    """Base exception for configuration loading errors."""


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """A configuration file explicitly requested does not exist.

    Attributes:
        path: The path that could not be found.
    """

    def __init__(self, path: str) -> None:
        """Initialize ConfigFileNotFoundError.

        Args:
            path: The path that could not be found.
        """
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


class ConfigFormatError(ConfigError, ValueError):
    """A configuration file exists but cannot be parsed.

    Attributes:
        path: The offending file.
        reason: Parser message.
    """

    def __init__(self, path: str, reason: str) -> None:
        """Initialize ConfigFormatError.

        Args:
            path: The offending file.
            reason: Parser message.
        """
        super().__init__(f"Invalid configuration in {path}: {reason}")
        self.path = path
        self.reason = reason


__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "MailwrightError",
]
