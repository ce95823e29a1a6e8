"""mailwright: compose and deliver email messages.

Examples:
    >>> from mailwright import MessageBuilder
    >>> builder = MessageBuilder().set_from("sender@example.com").add_to("user@example.com")
    >>> builder.build().recipients[0].address
    'user@example.com'
"""

from mailwright.mail import (
    Address,
    AddressFormatError,
    AlreadyBuiltError,
    DeliveryError,
    InvalidInputError,
    MailConfigurationError,
    MailError,
    MailSession,
    MailTransport,
    Message,
    MessageBuilder,
    MissingFromAddressError,
    MissingRecipientError,
    parse_address,
)
from mailwright.meta import __version__

__all__ = [
    "Address",
    "AddressFormatError",
    "AlreadyBuiltError",
    "DeliveryError",
    "InvalidInputError",
    "MailConfigurationError",
    "MailError",
    "MailSession",
    "MailTransport",
    "Message",
    "MessageBuilder",
    "MissingFromAddressError",
    "MissingRecipientError",
    "__version__",
    "parse_address",
]
