"""Email address parsing and validation.

``parse_address`` is the single entry point turning user input into an
``Address``. It accepts ``user@example.com`` and ``Name <user@example.com>``
forms and raises ``AddressFormatError`` for anything else, so callers can
swap in a stricter or looser parser with the same signature.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from email.headerregistry import Address as HeaderAddress

from mailwright.mail.exceptions import AddressFormatError

MAX_LOCAL_PART_LENGTH = 64
MAX_DOMAIN_LENGTH = 255
MIN_TLD_LENGTH = 2

_NAME_ADDR_PATTERN = re.compile(r"^(?P<name>[^<>]*)<(?P<addr>[^<>]*)>$")
_LOCAL_PART_PATTERN = re.compile(r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*$")
_DOMAIN_LABEL_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_NAME_SPECIALS = set('()<>@,;:\\".[]')


def _sanitize_name(name: str) -> str:
    """Strip control characters and double quotes from a display name."""
    cleaned = _CONTROL_CHARS.sub(" ", name).replace('"', "'")
    return " ".join(cleaned.split())


@dataclass(frozen=True, slots=True)
class Address:
    """A validated mailbox with an optional display name.

    Attributes:
        local_part: Part before the ``@``.
        domain: Part after the ``@``.
        name: Display name, empty when absent.

    Examples:
        >>> Address("ada", "example.org", "Ada Lovelace").formatted
        'Ada Lovelace <ada@example.org>'
    """

    local_part: str
    domain: str
    name: str = ""

    @property
    def address(self) -> str:
        """Return the bare ``local@domain`` form."""
        return f"{self.local_part}@{self.domain}"

    @property
    def formatted(self) -> str:
        """Return ``Name <local@domain>``, or the bare address without a name."""
        name = _sanitize_name(self.name)
        if not name:
            return self.address
        if any(char in _NAME_SPECIALS for char in name):
            name = f'"{name}"'
        return f"{name} <{self.address}>"

    def to_header(self) -> HeaderAddress:
        """Return the ``email.headerregistry`` form used when rendering MIME."""
        return HeaderAddress(display_name=_sanitize_name(self.name), username=self.local_part, domain=self.domain)

    def __str__(self) -> str:
        return self.formatted


def _validate_local_part(raw: str, local_part: str) -> None:
    if not local_part:
        raise AddressFormatError(raw, "missing local part")
    if len(local_part) > MAX_LOCAL_PART_LENGTH:
        raise AddressFormatError(raw, f"local part longer than {MAX_LOCAL_PART_LENGTH} characters")
    if not _LOCAL_PART_PATTERN.match(local_part):
        raise AddressFormatError(raw, "local part contains invalid characters")


def _validate_domain(raw: str, domain: str) -> None:
    if not domain:
        raise AddressFormatError(raw, "missing domain")
    if len(domain) > MAX_DOMAIN_LENGTH:
        raise AddressFormatError(raw, f"domain longer than {MAX_DOMAIN_LENGTH} characters")

    labels = domain.split(".")
    if len(labels) < 2:
        raise AddressFormatError(raw, "domain must contain a top-level domain")
    for label in labels:
        if not _DOMAIN_LABEL_PATTERN.match(label):
            raise AddressFormatError(raw, f"invalid domain label '{label}'")
    if len(labels[-1]) < MIN_TLD_LENGTH or labels[-1].isdigit():
        raise AddressFormatError(raw, "invalid top-level domain")


def parse_address(value: str, name: str | None = None) -> Address:
    """Parse and validate an email address.

    Args:
        value: ``user@example.com`` or ``Display Name <user@example.com>``.
        name: Display name overriding any name embedded in ``value``.

    Returns:
        The validated address.

    Raises:
        AddressFormatError: If ``value`` is not a syntactically valid address.

    Examples:
        >>> parse_address("Grace Hopper <grace@example.org>").name
        'Grace Hopper'
        >>> parse_address("ops@example.org", "Ops").formatted
        'Ops <ops@example.org>'
    """
    if not isinstance(value, str):
        raise AddressFormatError(repr(value), "address must be a string")

    raw = value.strip()
    if not raw:
        raise AddressFormatError(value, "empty address")
    if _CONTROL_CHARS.search(raw):
        raise AddressFormatError(value, "address contains control characters")

    embedded_name = ""
    match = _NAME_ADDR_PATTERN.match(raw)
    if match:
        embedded_name = match.group("name").strip().strip('"').strip()
        spec = match.group("addr").strip()
    else:
        spec = raw

    if any(char.isspace() for char in spec):
        raise AddressFormatError(value, "address contains whitespace")
    if spec.count("@") != 1:
        raise AddressFormatError(value, "address must contain exactly one '@'")

    local_part, domain = spec.split("@")
    _validate_local_part(value, local_part)
    _validate_domain(value, domain)

    display_name = name if name is not None else embedded_name
    return Address(local_part=local_part, domain=domain, name=display_name)


def normalize_address_list(values: Iterable[str], name: str | None = None) -> list[Address]:
    """Parse every value, failing on the first invalid one.

    Args:
        values: Address strings.
        name: Display name applied to every address.

    Returns:
        Parsed addresses in input order.

    Raises:
        AddressFormatError: On the first invalid address.
    """
    return [parse_address(value, name) for value in values]


__all__ = [
    "Address",
    "normalize_address_list",
    "parse_address",
]
