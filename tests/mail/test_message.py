"""Tests for the immutable message and its MIME rendering."""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone

import pytest

from mailwright.mail import ContentSpec, InvalidInputError, Message, MessageBuilder


def _builder() -> MessageBuilder:
    return MessageBuilder().set_from("Sender <sender@example.com>").add_to("to@example.com")


def test_message_is_immutable() -> None:
    message = _builder().build()
    with pytest.raises(dataclasses.FrozenInstanceError):
        message.subject = "changed"  # type: ignore[misc]


def test_recipients_and_envelope_sender() -> None:
    message = _builder().add_cc("cc@example.com").add_bcc("bcc@example.com").build()
    assert [a.address for a in message.recipients] == ["to@example.com", "cc@example.com", "bcc@example.com"]
    assert message.envelope_sender.address == "sender@example.com"


def test_to_mime_renders_standard_headers() -> None:
    sent = datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc)
    message = (
        _builder()
        .add_reply_to("reply@example.com")
        .set_subject("Greetings")
        .set_sent_date(sent)
        .set_msg("Hello")
        .build()
    )
    mime = message.to_mime()

    assert mime["From"] == "Sender <sender@example.com>"
    assert mime["To"] == "to@example.com"
    assert mime["Reply-To"] == "reply@example.com"
    assert mime["Subject"] == "Greetings"
    assert mime["Date"].datetime == sent
    assert mime.get_content_type() == "text/plain"


def test_to_mime_returns_a_fresh_object() -> None:
    message = _builder().build()
    first = message.to_mime()
    first["X-Extra"] = "1"
    assert "X-Extra" not in message.to_mime()


def test_to_mime_without_subject_or_body() -> None:
    mime = _builder().build().to_mime()
    assert "Subject" not in mime
    assert mime.get_content_type() == "text/plain"


def test_custom_headers_keep_all_values() -> None:
    message = _builder().add_header("X-Tag", "a").add_header("X-Tag", "b").build()
    assert message.to_mime().get_all("X-Tag") == ["a", "b"]


def test_custom_single_value_header_replaces_default() -> None:
    message = _builder().add_header("Subject", "From header").set_subject("From setter").build()
    assert message.to_mime().get_all("Subject") == ["From header"]


def test_charset_applied_to_text_body() -> None:
    message = _builder().set_charset("ISO-8859-1").set_content("café", "text/plain").build()
    mime = message.to_mime()
    assert mime.get_content_charset() == "iso-8859-1"
    assert mime.get_content().strip() == "café"


def test_non_text_body_is_encoded() -> None:
    message = _builder().set_content('{"ok": true}', "application/json").build()
    mime = message.to_mime()
    assert mime.get_content_type() == "application/json"
    assert mime.get_content() == b'{"ok": true}'


def test_unencodable_body_is_rejected() -> None:
    message = dataclasses.replace(_builder().build(), content=ContentSpec(body="☃", charset="us-ascii"))
    with pytest.raises(InvalidInputError, match="cannot be encoded"):
        message.to_mime()


def test_multipart_content_type_is_rejected() -> None:
    message = dataclasses.replace(_builder().build(), content=ContentSpec(body="body", mime_type="multipart/mixed"))
    with pytest.raises(InvalidInputError, match="multipart/mixed"):
        message.to_mime()


def test_get_header_is_case_insensitive() -> None:
    message: Message = _builder().add_header("X-Custom-Header", "Value").build()
    assert message.get_header("x-custom-header") == ("Value",)
    assert message.get_header("X-Missing") == ()
