"""Transport abstraction used by ``MessageBuilder.send()``.

A transport receives a fully built ``Message`` and the ``MailSession`` to
deliver it with, and returns the ``<...>`` message identifier it assigned.
Failures must surface as ``DeliveryError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from email.utils import make_msgid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from email.message import EmailMessage

    from mailwright.mail.message import Message
    from mailwright.mail.session import MailSession


class MailTransport(ABC):
    """Abstract delivery backend."""

    @abstractmethod
    def send(self, message: Message, session: MailSession) -> str:
        """Deliver ``message`` and return its ``<...>`` message identifier.

        Raises:
            DeliveryError: If delivery fails.
        """

    @staticmethod
    def prepare(message: Message) -> tuple[EmailMessage, str]:
        """Render ``message`` and stamp it with a fresh ``Message-ID``.

        A ``Message-ID`` supplied as a custom header is kept.
        """
        mime = message.to_mime()
        message_id = mime.get("Message-ID")
        if not message_id:
            message_id = make_msgid(domain=message.from_address.domain)
            mime["Message-ID"] = message_id
        return mime, str(message_id)


__all__ = ["MailTransport"]
