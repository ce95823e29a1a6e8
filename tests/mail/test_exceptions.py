"""Tests for the mail exception hierarchy."""

from __future__ import annotations

import pytest

from mailwright.config import MailwrightError
from mailwright.mail import (
    AddressFormatError,
    AlreadyBuiltError,
    DeliveryError,
    InvalidInputError,
    MailConfigurationError,
    MailError,
    MailValidationError,
    MissingFromAddressError,
    MissingRecipientError,
)


@pytest.mark.parametrize(
    ("exc", "bases"),
    [
        (InvalidInputError("x"), (MailError, ValueError)),
        (AddressFormatError("x", "bad"), (MailError, ValueError)),
        (AlreadyBuiltError(), (MailError, RuntimeError)),
        (MissingFromAddressError(), (MailValidationError,)),
        (MissingRecipientError(), (MailValidationError,)),
        (MailConfigurationError("x"), (MailError,)),
        (DeliveryError("x"), (MailError,)),
    ],
)
def test_hierarchy(exc: Exception, bases: tuple[type[Exception], ...]) -> None:
    assert isinstance(exc, MailwrightError)
    for base in bases:
        assert isinstance(exc, base)


def test_messages() -> None:
    assert str(MissingFromAddressError()) == "From address required"
    assert str(MissingRecipientError()) == "At least one receiver address required"
    assert str(AddressFormatError("nope", "missing '@'")) == "Invalid email address 'nope': missing '@'"


def test_delivery_error_keeps_cause() -> None:
    cause = OSError("reset")
    assert DeliveryError("failed", cause=cause).cause is cause
    assert DeliveryError("failed").cause is None
