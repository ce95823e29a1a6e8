"""Content-type resolution and message body description.

``resolve_content_type`` applies the charset rules, in order:

1. an empty or missing content type clears it (``None``);
2. an explicit ``charset=`` parameter wins and is kept verbatim, trailing
   whitespace trimmed;
3. a ``text/*`` type without charset gets ``; charset=<charset>`` appended
   when a charset is configured;
4. anything else is kept exactly as given.

Resolving an already resolved value returns it unchanged.
"""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass

TEXT_PLAIN = "text/plain"
TEXT_HTML = "text/html"
DEFAULT_CHARSET = "utf-8"

_CHARSET_PARAM_PATTERN = re.compile(r";\s*charset\s*=\s*(?P<charset>[^;]*)", re.IGNORECASE)


def extract_charset(content_type: str | None) -> str | None:
    """Return the ``charset`` parameter of a content type, if any.

    Examples:
        >>> extract_charset('text/html; charset="ISO-8859-1"')
        'ISO-8859-1'
        >>> extract_charset("text/plain") is None
        True
    """
    if not content_type:
        return None
    match = _CHARSET_PARAM_PATTERN.search(content_type)
    if match is None:
        return None
    charset = match.group("charset").strip().strip('"').strip()
    return charset or None


def media_type(content_type: str | None) -> str | None:
    """Return the lower-cased ``type/subtype`` part without parameters.

    Examples:
        >>> media_type("Text/HTML; charset=UTF-8")
        'text/html'
    """
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower() or None


def is_text_type(content_type: str | None) -> bool:
    """Return True when the primary type is ``text``."""
    mime = media_type(content_type)
    return mime is not None and mime.startswith("text/")


def resolve_content_type(content_type: str | None, charset: str | None = None) -> str | None:
    """Resolve the stored content type for ``content_type`` and ``charset``.

    Args:
        content_type: Requested content type, possibly with parameters.
        charset: Charset configured on the builder.

    Returns:
        The content type to store, or ``None`` when cleared.

    Examples:
        >>> resolve_content_type("text/html", "UTF-8")
        'text/html; charset=UTF-8'
        >>> resolve_content_type("text/html; charset=UTF-8  ", "ISO-8859-1")
        'text/html; charset=UTF-8'
        >>> resolve_content_type("application/json", "UTF-8")
        'application/json'
        >>> resolve_content_type("") is None
        True
    """
    if not content_type or not content_type.strip():
        return None
    if _CHARSET_PARAM_PATTERN.search(content_type):
        return content_type.rstrip()
    if charset and is_text_type(content_type):
        return f"{content_type}; charset={charset}"
    return content_type


def validate_charset(charset: str) -> str:
    """Return ``charset`` if Python knows the codec, else raise ``LookupError``."""
    codecs.lookup(charset)
    return charset


@dataclass(frozen=True, slots=True)
class ContentSpec:
    """Message body together with how it is typed.

    Attributes:
        body: The body text.
        mime_type: ``type/subtype`` without parameters.
        charset: Charset applied to text bodies, if any.
    """

    body: str
    mime_type: str = TEXT_PLAIN
    charset: str | None = None

    @property
    def maintype(self) -> str:
        return self.mime_type.split("/", 1)[0]

    @property
    def subtype(self) -> str:
        parts = self.mime_type.split("/", 1)
        return parts[1] if len(parts) == 2 and parts[1] else "plain"

    @property
    def content_type(self) -> str:
        """Render ``mime_type`` with its charset parameter when one applies."""
        if self.charset and self.maintype == "text":
            return f"{self.mime_type}; charset={self.charset}"
        return self.mime_type

    def encoded_body(self) -> bytes:
        """Encode ``body`` with ``charset``, UTF-8 when unset.

        Raises:
            LookupError: If the charset is unknown.
            UnicodeError: If the body holds characters the charset cannot encode.
        """
        return self.body.encode(self.charset or DEFAULT_CHARSET)

    @classmethod
    def from_content_type(cls, body: str, content_type: str | None, charset: str | None = None) -> ContentSpec:
        """Build a spec from a resolved content type string.

        An explicit ``charset=`` parameter in ``content_type`` takes precedence
        over ``charset``; a missing content type means ``text/plain``.
        """
        mime = media_type(content_type) or TEXT_PLAIN
        return cls(body=body, mime_type=mime, charset=extract_charset(content_type) or charset)


__all__ = [
    "DEFAULT_CHARSET",
    "TEXT_HTML",
    "TEXT_PLAIN",
    "ContentSpec",
    "extract_charset",
    "is_text_type",
    "media_type",
    "resolve_content_type",
    "validate_charset",
]
