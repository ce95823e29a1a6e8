"""SMTP connection parameters handed to transports.

A ``MailSession`` gathers everything a transport needs to reach the server:
host, port, credentials, TLS mode and timeouts. It can be built directly,
from ``mail.smtp.*`` style properties, or from the ``mail.smtp`` section of
``mailwright.conf.yml``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mailwright.mail.exceptions import MailConfigurationError

log = logging.getLogger(__name__)

DEFAULT_SMTP_PORT = 25
DEFAULT_SSL_PORT = 465
DEFAULT_TIMEOUT = 60.0

MAIL_HOST = "mail.smtp.host"
MAIL_PORT = "mail.smtp.port"
MAIL_USER = "mail.smtp.user"
MAIL_PASSWORD = "mail.smtp.password"
MAIL_SSL_ENABLE = "mail.smtp.ssl.enable"
MAIL_STARTTLS_ENABLE = "mail.smtp.starttls.enable"
MAIL_CONNECTION_TIMEOUT = "mail.smtp.connectiontimeout"
MAIL_TIMEOUT = "mail.smtp.timeout"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def validate_port(port: Any) -> int:
    """Return ``port`` as an int, rejecting values below 1."""
    try:
        value = int(port)
    except (TypeError, ValueError) as exc:
        raise MailConfigurationError(f"Invalid SMTP port: {port!r}") from exc
    if value < 1:
        raise MailConfigurationError(f"Cannot set SMTP port to a value less than 1: {value}")
    return value


def validate_timeout(timeout: Any, name: str = "timeout") -> float:
    """Return ``timeout`` in seconds as a float, rejecting non-positive values."""
    try:
        value = float(timeout)
    except (TypeError, ValueError) as exc:
        raise MailConfigurationError(f"Invalid {name}: {timeout!r}") from exc
    if value <= 0:
        raise MailConfigurationError(f"{name.capitalize()} must be greater than 0")
    return value


@dataclass(frozen=True, slots=True)
class SMTPCredentials:
    """Username/password pair for SMTP AUTH."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class SMTPSecurity:
    """TLS options for an SMTP connection.

    Attributes:
        use_ssl: Connect with implicit TLS (SMTPS).
        use_starttls: Upgrade a plain connection with STARTTLS when offered.
        verify_ssl: Verify the server certificate.
    """

    use_ssl: bool = False
    use_starttls: bool = False
    verify_ssl: bool = True


@dataclass(frozen=True, slots=True)
class MailSession:
    """Connection parameters for one SMTP server.

    Attributes:
        host: Server host name, ``None`` when unknown.
        port: Server port.
        credentials: Login credentials, ``None`` for anonymous relay.
        security: TLS options.
        connection_timeout: Seconds allowed to open the connection.
        timeout: Seconds allowed for each read on the open connection.

    Examples:
        >>> session = MailSession.from_properties({"mail.smtp.host": "smtp.session.com"})
        >>> session.host
        'smtp.session.com'
    """

    host: str | None = None
    port: int = DEFAULT_SMTP_PORT
    credentials: SMTPCredentials | None = None
    security: SMTPSecurity = field(default_factory=SMTPSecurity)
    connection_timeout: float = DEFAULT_TIMEOUT
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        validate_port(self.port)
        validate_timeout(self.connection_timeout, "connection timeout")
        validate_timeout(self.timeout, "timeout")

    def require_host(self) -> str:
        """Return the host, failing when none is configured.

        Raises:
            MailConfigurationError: If ``host`` is empty.
        """
        if not self.host:
            raise MailConfigurationError("Cannot find valid hostname for mail session")
        return self.host

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> MailSession:
        """Build a session from ``mail.smtp.*`` keys.

        Unknown keys are ignored. Timeouts are expressed in seconds.
        """
        username = properties.get(MAIL_USER)
        password = properties.get(MAIL_PASSWORD)
        credentials = SMTPCredentials(str(username), str(password or "")) if username else None
        use_ssl = _as_bool(properties.get(MAIL_SSL_ENABLE, False))
        default_port = DEFAULT_SSL_PORT if use_ssl else DEFAULT_SMTP_PORT

        return cls(
            host=properties.get(MAIL_HOST) or None,
            port=validate_port(properties.get(MAIL_PORT, default_port)),
            credentials=credentials,
            security=SMTPSecurity(
                use_ssl=use_ssl,
                use_starttls=_as_bool(properties.get(MAIL_STARTTLS_ENABLE, False)),
            ),
            connection_timeout=validate_timeout(
                properties.get(MAIL_CONNECTION_TIMEOUT, DEFAULT_TIMEOUT), "connection timeout"
            ),
            timeout=validate_timeout(properties.get(MAIL_TIMEOUT, DEFAULT_TIMEOUT)),
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> MailSession:
        """Build a session from the ``mail.smtp`` configuration section.

        Args:
            config: Full configuration mapping; the loaded configuration is
                used when omitted.
        """
        if config is None:
            from mailwright.config import get_config  # pylint: disable=import-outside-toplevel

            config = get_config()

        smtp: Mapping[str, Any] = (config.get("mail") or {}).get("smtp") or {}
        username = smtp.get("username")
        credentials = SMTPCredentials(str(username), str(smtp.get("password") or "")) if username else None
        use_ssl = _as_bool(smtp.get("use_ssl", False))
        port = smtp.get("port") or (DEFAULT_SSL_PORT if use_ssl else DEFAULT_SMTP_PORT)

        session = cls(
            host=smtp.get("host") or None,
            port=validate_port(port),
            credentials=credentials,
            security=SMTPSecurity(
                use_ssl=use_ssl,
                use_starttls=_as_bool(smtp.get("use_starttls", False)),
                verify_ssl=_as_bool(smtp.get("verify_ssl", True)),
            ),
            connection_timeout=validate_timeout(
                smtp.get("connection_timeout", DEFAULT_TIMEOUT), "connection timeout"
            ),
            timeout=validate_timeout(smtp.get("timeout", DEFAULT_TIMEOUT)),
        )
        log.debug("Mail session loaded from configuration (host=%s, port=%d)", session.host, session.port)
        return session


__all__ = [
    "DEFAULT_SMTP_PORT",
    "DEFAULT_SSL_PORT",
    "DEFAULT_TIMEOUT",
    "MAIL_HOST",
    "MailSession",
    "SMTPCredentials",
    "SMTPSecurity",
]
