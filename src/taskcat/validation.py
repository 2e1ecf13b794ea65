"""Input validation helpers for taskcat."""

import re

from taskcat.errors import FieldTooLongError, UsageError, ValidationError

MAX_FIELD_BYTES = 255

_FIELD_ENCODING = "utf-8"
# Undecodable bytes from disk survive a decode/encode cycle unchanged.
_FIELD_ERRORS = "surrogateescape"

_NUMBER_SEPARATOR_RE = re.compile(r"[\s,]+")


def encode_field(text: str) -> bytes:
    """Encode a text field to its on-disk bytes.

    Raises:
        ValidationError: If text holds a surrogate that has no byte form
    """
    try:
        return text.encode(_FIELD_ENCODING, _FIELD_ERRORS)
    except UnicodeEncodeError as e:
        raise ValidationError(f"Text cannot be encoded as UTF-8: {text!r}") from e


def decode_field(raw: bytes) -> str:
    """Decode on-disk bytes to a text field."""
    return raw.decode(_FIELD_ENCODING, _FIELD_ERRORS)


def field_length(text: str) -> int:
    """Return the on-disk byte length of a text field."""
    return len(encode_field(text))


def validate_field_length(label: str, value: str) -> None:
    """Reject text fields longer than MAX_FIELD_BYTES when encoded.

    Args:
        label: Human-readable field name used in the error message
        value: Field value to check

    Raises:
        FieldTooLongError: If the encoded value exceeds the limit
    """
    length = field_length(value)
    if length > MAX_FIELD_BYTES:
        raise FieldTooLongError(
            f"{label} is too long: {length} bytes (max {MAX_FIELD_BYTES})"
        )


def parse_number(text: str | int, label: str) -> int:
    """Parse a 1-based number typed by the user and return a 0-based index."""
    if isinstance(text, bool):
        raise UsageError(f"Invalid {label} number: {text}")
    try:
        num = int(text)
    except (TypeError, ValueError):
        raise UsageError(f"Invalid {label} number: {text}")
    if num < 1:
        raise UsageError(f"Invalid {label} number: {text}")
    return num - 1


def parse_number_list(text: str, label: str) -> list[int]:
    """Parse '1 3', '1,3' or '1, 3' into 0-based indices, keeping repeats.

    Repeats are kept so the store can reject them as a whole.
    """
    parts = [part for part in _NUMBER_SEPARATOR_RE.split(text.strip()) if part]
    if not parts:
        raise UsageError(f"No {label} numbers given")
    return [parse_number(part, label) for part in parts]
