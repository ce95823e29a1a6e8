"""Email composition and delivery.

Compose a message with :class:`MessageBuilder`, then ``build()`` it or
``send()`` it through a :class:`MailTransport` (SMTP by default).

Examples:
    >>> from mailwright.mail import MessageBuilder
    >>> from mailwright.mail.transports import InMemoryTransport
    >>> transport = InMemoryTransport()
    >>> message_id = (
    ...     MessageBuilder(transport=transport)
    ...     .set_host_name("localhost")
    ...     .set_from("sender@example.com")
    ...     .add_to("recipient@example.com")
    ...     .set_subject("Hello")
    ...     .set_msg("Hello from mailwright")
    ...     .send()
    ... )
    >>> message_id.startswith("<") and message_id.endswith(">")
    True
"""

from mailwright.mail.address import Address, normalize_address_list, parse_address
from mailwright.mail.builder import MessageBuilder
from mailwright.mail.content import TEXT_HTML, TEXT_PLAIN, ContentSpec, resolve_content_type
from mailwright.mail.exceptions import (
    AddressFormatError,
    AlreadyBuiltError,
    DeliveryError,
    InvalidInputError,
    MailConfigurationError,
    MailError,
    MailValidationError,
    MissingFromAddressError,
    MissingRecipientError,
)
from mailwright.mail.message import Message
from mailwright.mail.session import MailSession, SMTPCredentials, SMTPSecurity
from mailwright.mail.transport import MailTransport

__all__ = [
    "TEXT_HTML",
    "TEXT_PLAIN",
    "Address",
    "AddressFormatError",
    "AlreadyBuiltError",
    "ContentSpec",
    "DeliveryError",
    "InvalidInputError",
    "MailConfigurationError",
    "MailError",
    "MailSession",
    "MailTransport",
    "MailValidationError",
    "Message",
    "MessageBuilder",
    "MissingFromAddressError",
    "MissingRecipientError",
    "SMTPCredentials",
    "SMTPSecurity",
    "normalize_address_list",
    "parse_address",
    "resolve_content_type",
]
