"""Specialized exceptions raised by the mailwright.mail module.

Exception hierarchy::

    MailwrightError
        MailError (base for all mail errors)
            InvalidInputError (bad builder argument, also ValueError)
            AddressFormatError (unparsable address, also ValueError)
            AlreadyBuiltError (second build on one builder, also RuntimeError)
            MailValidationError (build-time precondition failed)
                MissingFromAddressError
                MissingRecipientError
            MailConfigurationError (no host, bad connection settings)
            DeliveryError (transport failure, wraps the cause)
"""

from __future__ import annotations

from mailwright.config.exceptions import MailwrightError


class MailError(MailwrightError):
    """Base exception for all mail module errors."""


class InvalidInputError(MailError, ValueError):
    """A builder argument is missing, empty or malformed.

    Raised synchronously by the call that received the argument.
    """


class AddressFormatError(MailError, ValueError):
    """An address string is not a syntactically valid email address.

    Attributes:
        address: The offending string.
        reason: Why it was rejected.
    """

    def __init__(self, address: str, reason: str) -> None:
        """Initialize AddressFormatError.

        Args:
            address: The offending string.
            reason: Why it was rejected.
        """
        super().__init__(f"Invalid email address '{address}': {reason}")
        self.address = address
        self.reason = reason


class AlreadyBuiltError(MailError, RuntimeError):
    """``build()`` already succeeded on this builder instance.

    The instance cannot produce another message; create a new builder.
    """

    def __init__(self) -> None:
        """Initialize AlreadyBuiltError."""
        super().__init__("The message has already been built; create a new builder to compose another message")


class MailValidationError(MailError):
    """The accumulated builder state is incomplete at build time."""


class MissingFromAddressError(MailValidationError):
    """No from address was set before ``build()``."""

    def __init__(self) -> None:
        """Initialize MissingFromAddressError."""
        super().__init__("From address required")


class MissingRecipientError(MailValidationError):
    """No to, cc or bcc recipient was set before ``build()``."""

    def __init__(self) -> None:
        """Initialize MissingRecipientError."""
        super().__init__("At least one receiver address required")


class MailConfigurationError(MailError):
    """Connection settings are missing or invalid."""


class DeliveryError(MailError):
    """The transport failed to deliver the message.

    Attributes:
        cause: The underlying exception, if any.
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        """Initialize DeliveryError.

        Args:
            message: Human-readable error message.
            cause: The underlying exception.
        """
        super().__init__(message)
        self.cause = cause


__all__ = [
    "AddressFormatError",
    "AlreadyBuiltError",
    "DeliveryError",
    "InvalidInputError",
    "MailConfigurationError",
    "MailError",
    "MailValidationError",
    "MissingFromAddressError",
    "MissingRecipientError",
]
