"""Builder accumulating message fields before a single build.

Per-field problems (malformed address, empty header, unknown charset) raise
immediately from the setter that received them. Completeness problems that
depend on the accumulated state (no from address, no recipient) are checked
by ``build()``, which succeeds at most once per builder.

Examples:
    >>> builder = MessageBuilder()
    >>> message = (
    ...     builder.set_from("sender@example.com")
    ...     .add_to("recipient@example.com")
    ...     .set_subject("Hello")
    ...     .set_content("<p>Hi</p>", "text/html")
    ...     .build()
    ... )
    >>> message.content_type
    'text/html'
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from mailwright.mail.address import Address, parse_address
from mailwright.mail.content import (
    TEXT_PLAIN,
    ContentSpec,
    extract_charset,
    media_type,
    resolve_content_type,
    validate_charset,
)
from mailwright.mail.exceptions import (
    AlreadyBuiltError,
    DeliveryError,
    InvalidInputError,
    MailConfigurationError,
    MailError,
    MissingFromAddressError,
    MissingRecipientError,
)
from mailwright.mail.message import Message
from mailwright.mail.session import (
    DEFAULT_SMTP_PORT,
    DEFAULT_SSL_PORT,
    DEFAULT_TIMEOUT,
    MailSession,
    SMTPCredentials,
    SMTPSecurity,
    validate_port,
    validate_timeout,
)
from mailwright.mail.transport import MailTransport

__all__ = ["AddressParser", "MessageBuilder"]

log = logging.getLogger(__name__)

AddressParser = Callable[[str, str | None], Address]

_FORBIDDEN_NAME_CHARS = frozenset(":\r\n\t ")


def _now() -> datetime:
    """Return the current UTC time truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def _single_line(value: str) -> str:
    return " ".join(value.splitlines()) if ("\r" in value or "\n" in value) else value


class MessageBuilder:
    """Accumulate message fields and build one immutable ``Message``.

    Args:
        transport: Delivery backend used by ``send()`` (SMTP by default).
        session: Connection parameters; takes precedence over ``set_host_name``.
        charset: Charset applied to text content types.
        address_parser: Function turning ``(value, name)`` into an ``Address``.
    """

    def __init__(
        self,
        *,
        transport: MailTransport | None = None,
        session: MailSession | None = None,
        charset: str | None = None,
        address_parser: AddressParser = parse_address,
    ) -> None:
        self._transport = transport
        self._session = session
        self._parse = address_parser

        self._from: Address | None = None
        self._bounce: Address | None = None
        self._to: list[Address] = []
        self._cc: list[Address] = []
        self._bcc: list[Address] = []
        self._reply_to: list[Address] = []
        self._headers: list[tuple[str, str]] = []

        self._subject: str | None = None
        self._body: str | None = None
        self._content_type: str | None = None
        self._charset: str | None = None
        self._sent_date: datetime | None = None

        self._host_name: str | None = None
        self._smtp_port: int | None = None
        self._credentials: SMTPCredentials | None = None
        self._use_ssl = False
        self._use_starttls = False
        self._connection_timeout = DEFAULT_TIMEOUT
        self._timeout = DEFAULT_TIMEOUT

        self._message: Message | None = None

        if charset is not None:
            self.set_charset(charset)

    @classmethod
    def from_config(
        cls,
        config: Any = None,
        *,
        transport: MailTransport | None = None,
    ) -> MessageBuilder:
        """Create a builder whose session and charset come from configuration.

        Args:
            config: Full configuration mapping; the loaded configuration is
                used when omitted.
            transport: Delivery backend.
        """
        if config is None:
            from mailwright.config import get_config  # pylint: disable=import-outside-toplevel

            config = get_config()
        charset = (config.get("mail") or {}).get("charset")
        return cls(transport=transport, session=MailSession.from_config(config), charset=charset)

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    def _parse_many(self, addresses: tuple[Any, ...], name: str | None) -> list[Address]:
        if len(addresses) == 1 and addresses[0] is None:
            raise InvalidInputError("Address argument list must not be null")
        if len(addresses) == 1 and isinstance(addresses[0], (list, tuple)):
            addresses = tuple(addresses[0])
        if not addresses:
            raise InvalidInputError("At least one address required")
        return [self._parse(address, name) for address in addresses]

    def set_from(self, address: str, name: str | None = None) -> MessageBuilder:
        """Set the author address.

        Raises:
            InvalidInputError: If ``address`` is None.
            AddressFormatError: If ``address`` is malformed.
        """
        if address is None:
            raise InvalidInputError("From address must not be null")
        self._from = self._parse(address, name)
        return self

    def set_bounce_address(self, address: str | None) -> MessageBuilder:
        """Set the SMTP envelope sender; ``None`` falls back to the from address."""
        self._bounce = None if address is None else self._parse(address, None)
        return self

    def add_to(self, *addresses: str, name: str | None = None) -> MessageBuilder:
        """Append TO recipients.

        Args:
            *addresses: One or more address strings.
            name: Display name applied to every address of this call.

        Raises:
            InvalidInputError: If no address or a null argument list is given.
            AddressFormatError: If any address is malformed; nothing is added.
        """
        self._to.extend(self._parse_many(addresses, name))
        return self

    def add_cc(self, *addresses: str, name: str | None = None) -> MessageBuilder:
        """Append CC recipients (same contract as ``add_to``)."""
        self._cc.extend(self._parse_many(addresses, name))
        return self

    def add_bcc(self, *addresses: str, name: str | None = None) -> MessageBuilder:
        """Append BCC recipients (same contract as ``add_to``)."""
        self._bcc.extend(self._parse_many(addresses, name))
        return self

    def add_reply_to(self, *addresses: str, name: str | None = None) -> MessageBuilder:
        """Append Reply-To addresses (same contract as ``add_to``)."""
        self._reply_to.extend(self._parse_many(addresses, name))
        return self

    @property
    def from_address(self) -> Address | None:
        return self._from

    @property
    def bounce_address(self) -> Address | None:
        return self._bounce

    @property
    def to_addresses(self) -> tuple[Address, ...]:
        return tuple(self._to)

    @property
    def cc_addresses(self) -> tuple[Address, ...]:
        return tuple(self._cc)

    @property
    def bcc_addresses(self) -> tuple[Address, ...]:
        return tuple(self._bcc)

    @property
    def reply_to_addresses(self) -> tuple[Address, ...]:
        return tuple(self._reply_to)

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def add_header(self, name: str, value: str) -> MessageBuilder:
        """Append a custom header; several values per name are kept in order.

        Raises:
            InvalidInputError: If ``name`` or ``value`` is empty, the name holds
                a colon, whitespace or control character, or the value holds a
                line break.
        """
        if not name:
            raise InvalidInputError("Header name cannot be null or empty")
        if not value:
            raise InvalidInputError("Header value cannot be null or empty")
        if any(char in _FORBIDDEN_NAME_CHARS or ord(char) < 32 for char in name):
            raise InvalidInputError(f"Invalid header name: {name!r}")
        if "\r" in value or "\n" in value:
            raise InvalidInputError(f"Header '{name}' value must not contain line breaks")
        self._headers.append((name, value))
        return self

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._headers)

    def get_header(self, name: str) -> tuple[str, ...]:
        """Return all values added for ``name`` (case-insensitive)."""
        wanted = name.lower()
        return tuple(value for header, value in self._headers if header.lower() == wanted)

    # ------------------------------------------------------------------
    # Subject, content and charset
    # ------------------------------------------------------------------

    def set_subject(self, subject: str | None) -> MessageBuilder:
        """Set the subject; line breaks are replaced with spaces."""
        self._subject = None if subject is None else _single_line(subject)
        return self

    @property
    def subject(self) -> str | None:
        return self._subject

    def set_charset(self, charset: str) -> MessageBuilder:
        """Set the charset used for text content.

        Raises:
            InvalidInputError: If the charset is empty or unknown.
        """
        if not charset:
            raise InvalidInputError("Charset cannot be null or empty")
        try:
            self._charset = validate_charset(charset)
        except LookupError as exc:
            raise InvalidInputError(f"Unknown charset: {charset}") from exc
        return self

    @property
    def charset(self) -> str | None:
        return self._charset

    def update_content_type(self, content_type: str | None) -> MessageBuilder:
        """Resolve and store the content type.

        ``None`` or empty clears it. An explicit ``charset=`` parameter is kept
        (trailing whitespace trimmed) and becomes the builder charset as given;
        a ``text/*`` type without one receives the configured charset.

        Raises:
            InvalidInputError: If the type is ``multipart/*``.
        """
        resolved = resolve_content_type(content_type, self._charset)
        if (media_type(resolved) or "").startswith("multipart/"):
            raise InvalidInputError(f"Content type '{resolved}' cannot carry a single string body")
        explicit = extract_charset(resolved)
        if explicit:
            self._charset = explicit
        self._content_type = resolved
        return self

    @property
    def content_type(self) -> str | None:
        return self._content_type

    def set_content(self, body: str, mime_type: str | None = TEXT_PLAIN) -> MessageBuilder:
        """Set the body and its content type.

        Raises:
            InvalidInputError: If ``body`` is not a string.
        """
        if not isinstance(body, str):
            raise InvalidInputError("Content must be a string")
        self.update_content_type(mime_type)
        self._body = body
        return self

    def set_msg(self, text: str) -> MessageBuilder:
        """Set a plain-text body.

        Raises:
            InvalidInputError: If ``text`` is empty.
        """
        if not text:
            raise InvalidInputError("Invalid message supplied")
        return self.set_content(text, TEXT_PLAIN)

    @property
    def content(self) -> str | None:
        return self._body

    def set_sent_date(self, sent_date: datetime | None) -> MessageBuilder:
        """Set the ``Date`` header value; ``None`` restores the default (now)."""
        if sent_date is not None and not isinstance(sent_date, datetime):
            raise InvalidInputError("Sent date must be a datetime")
        self._sent_date = sent_date
        return self

    @property
    def sent_date(self) -> datetime:
        """Return the explicit sent date, or now truncated to the second."""
        return self._sent_date if self._sent_date is not None else _now()

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def set_host_name(self, host_name: str) -> MessageBuilder:
        """Set the SMTP host used when no mail session is configured."""
        if not host_name:
            raise InvalidInputError("Host name cannot be null or empty")
        self._host_name = host_name
        return self

    def set_smtp_port(self, port: int) -> MessageBuilder:
        """Set the SMTP port.

        Raises:
            InvalidInputError: If ``port`` is lower than 1.
        """
        try:
            self._smtp_port = validate_port(port)
        except MailConfigurationError as exc:
            raise InvalidInputError(str(exc)) from exc
        return self

    def set_authentication(self, username: str, password: str) -> MessageBuilder:
        """Set SMTP AUTH credentials."""
        if not username:
            raise InvalidInputError("Username cannot be null or empty")
        self._credentials = SMTPCredentials(username=username, password=password or "")
        return self

    def set_ssl_on_connect(self, enabled: bool) -> MessageBuilder:
        """Use implicit TLS (SMTPS, port 465 by default)."""
        self._use_ssl = bool(enabled)
        return self

    def set_start_tls_enabled(self, enabled: bool) -> MessageBuilder:
        """Upgrade plain connections with STARTTLS when the server offers it."""
        self._use_starttls = bool(enabled)
        return self

    def set_socket_connection_timeout(self, seconds: float) -> MessageBuilder:
        """Set the connection timeout in seconds."""
        try:
            self._connection_timeout = validate_timeout(seconds, "connection timeout")
        except MailConfigurationError as exc:
            raise InvalidInputError(str(exc)) from exc
        return self

    def set_socket_timeout(self, seconds: float) -> MessageBuilder:
        """Set the socket read timeout in seconds."""
        try:
            self._timeout = validate_timeout(seconds)
        except MailConfigurationError as exc:
            raise InvalidInputError(str(exc)) from exc
        return self

    @property
    def socket_connection_timeout(self) -> float:
        return self._session.connection_timeout if self._session is not None else self._connection_timeout

    @property
    def socket_timeout(self) -> float:
        return self._session.timeout if self._session is not None else self._timeout

    def set_mail_session(self, session: MailSession) -> MessageBuilder:
        """Use an existing session; it takes precedence over the host setters."""
        if session is None:
            raise InvalidInputError("Mail session must not be null")
        self._session = session
        return self

    def set_transport(self, transport: MailTransport) -> MessageBuilder:
        """Attach the delivery backend used by ``send()``."""
        self._transport = transport
        return self

    @property
    def host_name(self) -> str | None:
        """Return the session host, else the configured host name, else ``None``."""
        if self._session is not None:
            return self._session.host or None
        return self._host_name or None

    @property
    def mail_session(self) -> MailSession:
        """Return the session used for delivery.

        Raises:
            MailConfigurationError: If neither a session nor a host is set.
        """
        if self._session is not None:
            return self._session
        if not self._host_name:
            raise MailConfigurationError("Cannot find valid hostname for mail session")

        default_port = DEFAULT_SSL_PORT if self._use_ssl else DEFAULT_SMTP_PORT
        return MailSession(
            host=self._host_name,
            port=self._smtp_port or default_port,
            credentials=self._credentials,
            security=SMTPSecurity(use_ssl=self._use_ssl, use_starttls=self._use_starttls),
            connection_timeout=self._connection_timeout,
            timeout=self._timeout,
        )

    # ------------------------------------------------------------------
    # Build and send
    # ------------------------------------------------------------------

    @property
    def is_built(self) -> bool:
        return self._message is not None

    @property
    def message(self) -> Message | None:
        """Return the built message, ``None`` before a successful build."""
        return self._message

    def build(self) -> Message:
        """Validate the accumulated fields and produce the message.

        Raises:
            AlreadyBuiltError: If ``build()`` already succeeded on this builder.
            MissingFromAddressError: If no from address was set.
            MissingRecipientError: If no to, cc or bcc recipient was set.
            InvalidInputError: If the body cannot be encoded with its charset.
        """
        if self._message is not None:
            raise AlreadyBuiltError()
        if self._from is None:
            raise MissingFromAddressError()
        if not (self._to or self._cc or self._bcc):
            raise MissingRecipientError()

        content_type = resolve_content_type(self._content_type, self._charset)
        content: ContentSpec | None = None
        if self._body is not None or content_type is not None:
            content = ContentSpec.from_content_type(self._body or "", content_type, self._charset)

        try:
            (content or ContentSpec(body="", charset=self._charset)).encoded_body()
        except LookupError as exc:
            raise InvalidInputError(f"Unknown charset for message body: {exc}") from exc
        except UnicodeError as exc:
            raise InvalidInputError(f"Body cannot be encoded with its charset: {exc}") from exc

        message = Message(
            from_address=self._from,
            to=tuple(self._to),
            cc=tuple(self._cc),
            bcc=tuple(self._bcc),
            reply_to=tuple(self._reply_to),
            headers=tuple(self._headers),
            subject=self._subject,
            content=content,
            content_type=content_type,
            sent_date=self.sent_date,
            charset=self._charset,
            bounce_address=self._bounce,
        )
        self._message = message
        log.debug(
            "Message built (from=%s, recipients=%d, content_type=%s)",
            message.from_address.address,
            len(message.recipients),
            message.content_type,
        )
        return message

    def send(self) -> str:
        """Build the message if needed and deliver it.

        A message already produced by ``build()`` is reused.

        Returns:
            The ``<...>`` message identifier assigned by the transport.

        Raises:
            MailConfigurationError: If no host is configured; raised before
                the transport is reached.
            AlreadyBuiltError, MissingFromAddressError, MissingRecipientError:
                As raised by ``build()``.
            DeliveryError: If the transport fails.
        """
        session = self.mail_session
        session.require_host()

        message = self._message if self._message is not None else self.build()

        if self._transport is None:
            from mailwright.mail.transports.smtp import SMTPTransport  # pylint: disable=import-outside-toplevel

            self._transport = SMTPTransport()

        try:
            message_id = self._transport.send(message, session)
        except MailError:
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise DeliveryError(f"Unexpected transport failure: {exc}", cause=exc) from exc

        log.info("Message %s sent to %d recipient(s) via %s", message_id, len(message.recipients), session.host)
        return message_id
