"""Immutable outbound message produced by ``MessageBuilder.build()``.

A ``Message`` only describes the mail. Rendering to RFC 2822 is delegated to
``email.message.EmailMessage`` through ``to_mime()``, which returns a fresh
object on every call so transports can add their own headers (``Message-ID``)
without touching the message.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from email.policy import default as default_policy

from mailwright.mail.address import Address
from mailwright.mail.content import DEFAULT_CHARSET, ContentSpec
from mailwright.mail.exceptions import InvalidInputError


@dataclass(frozen=True, slots=True)
class Message:
    """A fully assembled, read-only email message.

    Attributes:
        from_address: Author of the message.
        to: Primary recipients.
        cc: Carbon-copy recipients.
        bcc: Blind carbon-copy recipients.
        reply_to: Reply-To addresses.
        headers: Custom ``(name, value)`` headers in insertion order.
        subject: Subject line, ``None`` when unset.
        content: Body description, ``None`` when no content was set.
        content_type: Resolved content type, ``None`` when unset.
        sent_date: Value of the ``Date`` header.
        charset: Charset configured on the builder.
        bounce_address: SMTP envelope sender, ``None`` to use ``from_address``.
    """

    from_address: Address
    to: tuple[Address, ...]
    cc: tuple[Address, ...]
    bcc: tuple[Address, ...]
    reply_to: tuple[Address, ...]
    headers: tuple[tuple[str, str], ...]
    subject: str | None
    content: ContentSpec | None
    content_type: str | None
    sent_date: datetime
    charset: str | None = None
    bounce_address: Address | None = None

    @property
    def recipients(self) -> tuple[Address, ...]:
        """Return every envelope recipient (to, cc then bcc)."""
        return self.to + self.cc + self.bcc

    @property
    def envelope_sender(self) -> Address:
        """Return the address used for ``MAIL FROM``."""
        return self.bounce_address or self.from_address

    def get_header(self, name: str) -> tuple[str, ...]:
        """Return all values of a custom header, case-insensitively.

        Examples:
            >>> message.get_header("x-custom-header")  # doctest: +SKIP
            ('Value',)
        """
        wanted = name.lower()
        return tuple(value for header, value in self.headers if header.lower() == wanted)

    def to_mime(self) -> EmailMessage:
        """Render the message as a new ``EmailMessage``.

        Raises:
            InvalidInputError: If the body cannot be encoded with its charset
                or the content type cannot carry a single string body.
        """
        mime = EmailMessage(policy=default_policy)
        mime["From"] = self.from_address.to_header()
        if self.to:
            mime["To"] = [address.to_header() for address in self.to]
        if self.cc:
            mime["Cc"] = [address.to_header() for address in self.cc]
        if self.bcc:
            mime["Bcc"] = [address.to_header() for address in self.bcc]
        if self.reply_to:
            mime["Reply-To"] = [address.to_header() for address in self.reply_to]
        if self.subject:
            mime["Subject"] = self.subject
        mime["Date"] = self.sent_date

        self._set_body(mime)

        for name, value in self.headers:
            if mime.policy.header_max_count(name) == 1 and name in mime:
                del mime[name]
            mime[name] = value
        return mime

    def _set_body(self, mime: EmailMessage) -> None:
        content = self.content or ContentSpec(body="", charset=self.charset)
        charset = content.charset or DEFAULT_CHARSET

        if content.maintype == "multipart":
            raise InvalidInputError(f"Content type '{content.mime_type}' cannot carry a single string body")

        try:
            if content.maintype == "text":
                mime.set_content(content.body, subtype=content.subtype, charset=charset)
            else:
                mime.set_content(
                    content.encoded_body(),
                    maintype=content.maintype,
                    subtype=content.subtype,
                )
        except (UnicodeError, LookupError) as exc:
            raise InvalidInputError(f"Body cannot be encoded as {charset}: {exc}") from exc


__all__ = ["Message"]
