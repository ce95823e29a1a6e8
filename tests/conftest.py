"""Shared pytest fixtures for the mailwright test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["FORCE_COLOR"] = "0"
os.environ["COLUMNS"] = "200"  # Prevent text wrapping in CLI output

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from mailwright.config import clear_config
from mailwright.mail import MailSession, MessageBuilder
from mailwright.mail.transports import InMemoryTransport

# pylint: disable=redefined-outer-name


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep user configuration files and logging handlers out of every test."""
    monkeypatch.delenv("MAILWRIGHT_CONFIG", raising=False)
    monkeypatch.delenv("MAILWRIGHT_SMTP_PASSWORD", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    clear_config()

    yield

    clear_config()
    root = logging.getLogger("mailwright")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def transport() -> InMemoryTransport:
    """Provide a transport that records deliveries."""
    return InMemoryTransport()


@pytest.fixture
def builder(transport: InMemoryTransport) -> MessageBuilder:
    """Provide a builder pointed at localhost and the in-memory transport."""
    return MessageBuilder(transport=transport).set_host_name("localhost").set_smtp_port(2500)


@pytest.fixture
def session() -> MailSession:
    """Provide a minimal session for direct transport calls."""
    return MailSession(host="localhost", port=2500)
