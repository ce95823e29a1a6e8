"""SMTP transport backed by :mod:`smtplib`.

Connection settings come from the ``MailSession`` passed to ``send``. The
connection timeout bounds the TCP/TLS handshake; once connected, the socket
timeout is switched to the session read timeout.

When TRACE logging is enabled for this module, the SMTP dialogue, TLS
details and envelope are logged with an ``[SMTP]`` prefix.
"""

from __future__ import annotations

import contextlib
import io
import logging
import smtplib
import ssl
import sys
from typing import TYPE_CHECKING, Any

from mailwright.logging import TRACE_LEVEL
from mailwright.mail.exceptions import DeliveryError
from mailwright.mail.transport import MailTransport

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mailwright.mail.message import Message
    from mailwright.mail.session import MailSession

__all__ = ["SMTPTransport"]

log = logging.getLogger(__name__)


@contextlib.contextmanager
def _capture_smtp_debug() -> Iterator[io.StringIO]:
    """Redirect stderr, where smtplib writes its debug output, into a buffer."""
    buffer = io.StringIO()
    original = sys.stderr
    sys.stderr = buffer
    try:
        yield buffer
    finally:
        sys.stderr = original


def _log_smtp_debug_output(buffer: io.StringIO) -> None:
    """Replay captured smtplib debug lines at TRACE level."""
    if not log.isEnabledFor(TRACE_LEVEL):
        return
    for raw_line in buffer.getvalue().splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("send:"):
            log.log(TRACE_LEVEL, "[SMTP] >>> %s", line[5:].strip())
        elif line.startswith("reply:"):
            log.log(TRACE_LEVEL, "[SMTP] <<< %s", line[6:].strip())
        else:
            log.log(TRACE_LEVEL, "[SMTP] %s", line)


def _common_name(entries: Any) -> str | None:
    try:
        for rdn in entries:
            for key, value in rdn:
                if key == "commonName":
                    return str(value)
    except (TypeError, ValueError):
        return None
    return None


def _extract_ssl_info(sock: ssl.SSLSocket | None) -> dict[str, Any]:
    """Collect TLS version, cipher and peer certificate names from a socket."""
    if sock is None:
        return {}

    info: dict[str, Any] = {}
    try:
        info["version"] = sock.version() or "unknown"
    except Exception:  # pylint: disable=broad-exception-caught
        info["version"] = "unknown"

    try:
        cipher = sock.cipher()
    except Exception:  # pylint: disable=broad-exception-caught
        cipher = None
    if cipher:
        info["cipher_name"], info["cipher_protocol"], info["cipher_bits"] = cipher

    try:
        cert = sock.getpeercert()
    except Exception:  # pylint: disable=broad-exception-caught
        cert = None
    if cert:
        peer_cn = _common_name(cert.get("subject", ()))
        if peer_cn:
            info["peer_cn"] = peer_cn
        issuer_cn = _common_name(cert.get("issuer", ()))
        if issuer_cn:
            info["issuer_cn"] = issuer_cn
        if "notAfter" in cert:
            info["valid_until"] = cert["notAfter"]
    return info


def _log_tls(label: str, sock: Any) -> None:
    info = _extract_ssl_info(sock)
    if not info:
        return
    log.log(
        TRACE_LEVEL,
        "[SMTP] %s: %s, cipher=%s, peer=%s",
        label,
        info.get("version"),
        info.get("cipher_name", "?"),
        info.get("peer_cn", "?"),
    )


class SMTPTransport(MailTransport):
    """Deliver messages over SMTP or SMTPS.

    Examples:
        >>> transport = SMTPTransport()
        >>> session = MailSession(host="smtp.example.com", port=587)  # doctest: +SKIP
        >>> transport.send(message, session)  # doctest: +SKIP
        '<171234.1234.5678@example.com>'
    """

    def send(self, message: Message, session: MailSession) -> str:
        """Send ``message`` through the server described by ``session``.

        Returns:
            The ``Message-ID`` of the delivered message.

        Raises:
            DeliveryError: On connection, TLS, authentication or SMTP errors.
        """
        host = session.require_host()
        security = session.security
        mime, message_id = self.prepare(message)
        recipients = [address.address for address in message.recipients]
        sender = message.envelope_sender.address

        trace = log.isEnabledFor(TRACE_LEVEL)
        context = ssl.create_default_context()
        if not security.verify_ssl:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        client_kwargs: dict[str, Any] = {"host": host, "port": session.port, "timeout": session.connection_timeout}
        if security.use_ssl:
            client_cls: type[smtplib.SMTP] = smtplib.SMTP_SSL
            client_kwargs["context"] = context
        else:
            client_cls = smtplib.SMTP

        if trace:
            mode = "SSL" if security.use_ssl else "plain"
            log.log(TRACE_LEVEL, "[SMTP] Connecting to %s:%d (%s)", host, session.port, mode)

        debug_buffer: io.StringIO | None = None
        try:
            with contextlib.ExitStack() as stack:
                if trace:
                    debug_buffer = stack.enter_context(_capture_smtp_debug())
                with client_cls(**client_kwargs) as client:
                    if trace:
                        client.set_debuglevel(1)
                    sock = getattr(client, "sock", None)
                    if sock is not None:
                        sock.settimeout(session.timeout)
                    if trace and security.use_ssl:
                        _log_tls("SSL", sock)

                    client.ehlo()
                    if security.use_starttls and not security.use_ssl and client.has_extn("STARTTLS"):
                        if trace:
                            log.log(TRACE_LEVEL, "[SMTP] Upgrading connection with STARTTLS")
                        client.starttls(context=context)
                        client.ehlo()
                        if trace:
                            _log_tls("TLS", getattr(client, "sock", None))

                    if session.credentials is not None:
                        if trace:
                            log.log(TRACE_LEVEL, "[SMTP] Authenticating as: %s", session.credentials.username)
                        client.login(session.credentials.username, session.credentials.password)
                        if trace:
                            log.log(TRACE_LEVEL, "[SMTP] Authentication successful")

                    if trace:
                        log.log(TRACE_LEVEL, "[SMTP] MAIL FROM: <%s>", sender)
                        for recipient in recipients:
                            log.log(TRACE_LEVEL, "[SMTP] RCPT TO: <%s>", recipient)
                    refused = client.send_message(mime, from_addr=sender, to_addrs=recipients)
        except (smtplib.SMTPException, OSError) as exc:
            if debug_buffer is not None:
                _log_smtp_debug_output(debug_buffer)
            raise DeliveryError(f"SMTP delivery to {host}:{session.port} failed: {exc}", cause=exc) from exc

        if debug_buffer is not None:
            _log_smtp_debug_output(debug_buffer)
        if refused:
            log.warning("Server refused %d recipient(s): %s", len(refused), ", ".join(sorted(refused)))
        if trace:
            log.log(TRACE_LEVEL, "[SMTP] Message sent successfully, Message-ID=%s", message_id)
        log.debug("Email sent via SMTP %s:%d: %s", host, session.port, message_id)
        return message_id
