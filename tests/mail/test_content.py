"""Tests for content-type resolution."""

from __future__ import annotations

import pytest

from mailwright.mail.content import (
    TEXT_PLAIN,
    ContentSpec,
    extract_charset,
    is_text_type,
    media_type,
    resolve_content_type,
    validate_charset,
)


@pytest.mark.parametrize(
    ("content_type", "charset", "expected"),
    [
        (None, "UTF-8", None),
        ("", "UTF-8", None),
        ("   ", None, None),
        ("text/plain", None, "text/plain"),
        ("text/html", "UTF-8", "text/html; charset=UTF-8"),
        ("TEXT/HTML", "UTF-8", "TEXT/HTML; charset=UTF-8"),
        ("text/xml", "ISO-8859-1", "text/xml; charset=ISO-8859-1"),
        ("application/json", "UTF-8", "application/json"),
        ("image/png", None, "image/png"),
        ("text/html; charset=UTF-8  ", "ISO-8859-1", "text/html; charset=UTF-8"),
        ("text/html;CHARSET=us-ascii", "UTF-8", "text/html;CHARSET=us-ascii"),
    ],
)
def test_resolve_content_type(content_type: str | None, charset: str | None, expected: str | None) -> None:
    assert resolve_content_type(content_type, charset) == expected


@pytest.mark.parametrize(
    ("content_type", "charset"),
    [
        ("text/html", "UTF-8"),
        ("text/plain; charset=ISO-8859-1 ", "UTF-8"),
        ("application/pdf", "UTF-8"),
    ],
)
def test_resolve_content_type_is_idempotent(content_type: str, charset: str) -> None:
    once = resolve_content_type(content_type, charset)
    assert resolve_content_type(once, charset) == once


def test_extract_charset() -> None:
    assert extract_charset('text/html; charset="ISO-8859-1"') == "ISO-8859-1"
    assert extract_charset("text/html; charset=UTF-8; format=flowed") == "UTF-8"
    assert extract_charset("text/plain") is None
    assert extract_charset("text/plain; charset=") is None
    assert extract_charset(None) is None


def test_media_type_and_text_detection() -> None:
    assert media_type("Text/HTML; charset=UTF-8") == "text/html"
    assert media_type(None) is None
    assert is_text_type("text/csv") is True
    assert is_text_type("application/json") is False
    assert is_text_type(None) is False


def test_validate_charset() -> None:
    assert validate_charset("UTF-8") == "UTF-8"
    with pytest.raises(LookupError):
        validate_charset("definitely-not-a-codec")


class TestContentSpec:
    """Body description derived from content types."""

    def test_defaults_to_plain_text(self) -> None:
        spec = ContentSpec.from_content_type("hi", None)
        assert spec.mime_type == TEXT_PLAIN
        assert spec.charset is None
        assert spec.content_type == "text/plain"

    def test_explicit_charset_wins(self) -> None:
        spec = ContentSpec.from_content_type("hi", "text/html; charset=ISO-8859-1", "UTF-8")
        assert spec.mime_type == "text/html"
        assert spec.charset == "ISO-8859-1"
        assert (spec.maintype, spec.subtype) == ("text", "html")

    def test_charset_only_rendered_for_text(self) -> None:
        spec = ContentSpec(body="{}", mime_type="application/json", charset="UTF-8")
        assert spec.content_type == "application/json"

    def test_missing_subtype_falls_back_to_plain(self) -> None:
        assert ContentSpec(body="", mime_type="text").subtype == "plain"
