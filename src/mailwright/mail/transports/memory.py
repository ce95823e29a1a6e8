"""In-memory transport for tests and dry runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mailwright.mail.exceptions import DeliveryError
from mailwright.mail.transport import MailTransport

if TYPE_CHECKING:
    from email.message import EmailMessage

    from mailwright.mail.message import Message
    from mailwright.mail.session import MailSession

__all__ = ["Delivery", "InMemoryTransport"]

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Delivery:
    """One message accepted by ``InMemoryTransport``."""

    message_id: str
    message: Message
    mime: EmailMessage
    session: MailSession


class InMemoryTransport(MailTransport):
    """Record messages instead of sending them.

    Args:
        fail_with: Exception raised (wrapped in ``DeliveryError``) on every send.

    Examples:
        >>> transport = InMemoryTransport()
        >>> transport.send(message, session)  # doctest: +SKIP
        '<...@example.com>'
        >>> len(transport.deliveries)  # doctest: +SKIP
        1
    """

    def __init__(self, *, fail_with: BaseException | None = None) -> None:
        self.deliveries: list[Delivery] = []
        self._fail_with = fail_with

    @property
    def messages(self) -> list[Message]:
        """Return the delivered messages in order."""
        return [delivery.message for delivery in self.deliveries]

    def send(self, message: Message, session: MailSession) -> str:
        """Record the delivery and return the generated message id."""
        if self._fail_with is not None:
            raise DeliveryError(f"Delivery failed: {self._fail_with}", cause=self._fail_with) from self._fail_with

        mime, message_id = self.prepare(message)
        self.deliveries.append(Delivery(message_id=message_id, message=message, mime=mime, session=session))
        log.debug("Message %s stored in memory (host=%s)", message_id, session.host)
        return message_id
