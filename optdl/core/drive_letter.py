"""Drive letter, disk id and ensure value validation."""
import re
from typing import Optional, Union

from optdl.core.errors import InvalidArgumentError
from optdl.core.messages import MessageBundle, default_messages
from optdl.models.disk import Ensure

DRIVE_LETTER_PATTERN = re.compile(r"[A-Za-z]:?")
DISK_ID_PATTERN = re.compile(r"[0-9]+")

# \\?\Volume{6e5e5d3c-8e6b-11ea-a3a4-806e6f6e6963}\ with the trailing backslash optional
VOLUME_GUID_PATTERN = re.compile(
    r"\\\\\?\\Volume\{[0-9A-Fa-f]{8}(?:-[0-9A-Fa-f]{4}){3}-[0-9A-Fa-f]{12}\}\\?"
)


def assert_drive_letter_valid(
    value: str,
    colon: bool = False,
    messages: Optional[MessageBundle] = None,
) -> str:
    """Validate a drive letter and return it in normalized form.

    Args:
        value: "e", "E", "e:" or "E:"
        colon: Append a colon to the returned letter

    Returns:
        Upper-case letter, e.g. "E" or "E:" when colon is set

    Raises:
        InvalidArgumentError: If value is not a single letter with optional colon
    """
    if not isinstance(value, str) or not DRIVE_LETTER_PATTERN.fullmatch(value):
        messages = messages or default_messages()
        raise InvalidArgumentError(
            messages.format("invalid_drive_letter_error", value=value),
            argument="drive_letter",
            value=value,
        )

    letter = value[0].upper()
    return f"{letter}:" if colon else letter


def try_normalize_drive_letter(value: Optional[str]) -> Optional[str]:
    """Return value as "X:" or None when it is not a drive letter."""
    if not value or not DRIVE_LETTER_PATTERN.fullmatch(value):
        return None
    return f"{value[0].upper()}:"


def is_volume_guid_path(value: Optional[str]) -> bool:
    """True when value is a \\\\?\\Volume{GUID}\\ path (no drive letter assigned)."""
    return bool(value) and bool(VOLUME_GUID_PATTERN.fullmatch(value))


def parse_disk_id(value: Union[str, int], messages: Optional[MessageBundle] = None) -> int:
    """Parse a 1-based positional disk id."""
    text = str(value).strip() if value is not None else ""
    if not DISK_ID_PATTERN.fullmatch(text) or int(text) < 1:
        messages = messages or default_messages()
        raise InvalidArgumentError(
            messages.format("invalid_disk_id_error", value=value),
            argument="disk_id",
            value=value,
        )
    return int(text)


def parse_ensure(value: Union[str, Ensure, None], messages: Optional[MessageBundle] = None) -> Ensure:
    """Accept an Ensure or its case-insensitive name; None means Present."""
    if value is None:
        return Ensure.PRESENT
    if isinstance(value, Ensure):
        return value

    for member in Ensure:
        if str(value).strip().lower() == member.value.lower():
            return member

    messages = messages or default_messages()
    raise InvalidArgumentError(
        messages.format("invalid_ensure_error", value=value),
        argument="ensure",
        value=value,
    )
