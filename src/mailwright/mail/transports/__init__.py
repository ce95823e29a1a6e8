"""Transport implementations for mail delivery.

Available transports:
    - SMTPTransport: SMTP/SMTPS delivery through smtplib
    - InMemoryTransport: records messages, for tests and dry runs
"""

from mailwright.mail.transports.memory import Delivery, InMemoryTransport
from mailwright.mail.transports.smtp import SMTPTransport

__all__ = [
    "Delivery",
    "InMemoryTransport",
    "SMTPTransport",
]
