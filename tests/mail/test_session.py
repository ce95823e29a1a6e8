"""Tests for mail session construction."""

from __future__ import annotations

import pytest
from box import Box

from mailwright.mail import MailConfigurationError, MailSession, SMTPCredentials
from mailwright.mail.session import DEFAULT_SSL_PORT, validate_port, validate_timeout


def test_defaults() -> None:
    session = MailSession()
    assert session.host is None
    assert session.port == 25
    assert session.credentials is None
    assert session.security.use_ssl is False
    assert session.security.verify_ssl is True
    assert session.connection_timeout == 60.0
    assert session.timeout == 60.0


def test_require_host() -> None:
    assert MailSession(host="smtp.example.com").require_host() == "smtp.example.com"
    with pytest.raises(MailConfigurationError, match="Cannot find valid hostname"):
        MailSession().require_host()


@pytest.mark.parametrize("port", [0, -25, "abc", None])
def test_invalid_port(port: object) -> None:
    with pytest.raises(MailConfigurationError):
        validate_port(port)


@pytest.mark.parametrize("timeout", [0, -1, "soon"])
def test_invalid_timeout(timeout: object) -> None:
    with pytest.raises(MailConfigurationError):
        validate_timeout(timeout)


def test_post_init_validates_fields() -> None:
    with pytest.raises(MailConfigurationError):
        MailSession(host="smtp.example.com", port=0)


def test_credentials_password_hidden_from_repr() -> None:
    credentials = SMTPCredentials(username="user", password="s3cret")
    assert "s3cret" not in repr(credentials)


class TestFromProperties:
    """Sessions built from ``mail.smtp.*`` keys."""

    def test_host_only(self) -> None:
        session = MailSession.from_properties({"mail.smtp.host": "smtp.session.com"})
        assert session.host == "smtp.session.com"
        assert session.port == 25

    def test_full_properties(self) -> None:
        session = MailSession.from_properties(
            {
                "mail.smtp.host": "smtp.example.com",
                "mail.smtp.port": "2525",
                "mail.smtp.user": "user",
                "mail.smtp.password": "pass",
                "mail.smtp.starttls.enable": "true",
                "mail.smtp.connectiontimeout": "5",
                "mail.smtp.timeout": 7,
                "mail.smtp.unrelated": "ignored",
            }
        )
        assert session.port == 2525
        assert session.credentials == SMTPCredentials("user", "pass")
        assert session.security.use_starttls is True
        assert session.connection_timeout == 5.0
        assert session.timeout == 7.0

    def test_ssl_changes_default_port(self) -> None:
        session = MailSession.from_properties({"mail.smtp.host": "h.example.com", "mail.smtp.ssl.enable": "yes"})
        assert session.security.use_ssl is True
        assert session.port == DEFAULT_SSL_PORT


class TestFromConfig:
    """Sessions built from the ``mail.smtp`` configuration section."""

    def test_reads_smtp_section(self) -> None:
        config = Box(
            {
                "mail": {
                    "smtp": {
                        "host": "smtp.config.com",
                        "port": 587,
                        "username": "bot",
                        "password": "pw",
                        "use_starttls": True,
                        "verify_ssl": False,
                        "timeout": 12,
                    }
                }
            }
        )
        session = MailSession.from_config(config)
        assert session.host == "smtp.config.com"
        assert session.port == 587
        assert session.credentials == SMTPCredentials("bot", "pw")
        assert session.security.use_starttls is True
        assert session.security.verify_ssl is False
        assert session.timeout == 12.0

    def test_empty_section_uses_defaults(self) -> None:
        session = MailSession.from_config({})
        assert session == MailSession()

    def test_ssl_without_port_uses_465(self) -> None:
        session = MailSession.from_config({"mail": {"smtp": {"host": "h.example.com", "use_ssl": True}}})
        assert session.port == DEFAULT_SSL_PORT

    def test_packaged_defaults(self) -> None:
        session = MailSession.from_config()
        assert session.host is None
        assert session.port == 25

    def test_invalid_port_in_config(self) -> None:
        with pytest.raises(MailConfigurationError):
            MailSession.from_config({"mail": {"smtp": {"port": -1}}})
