"""
Input Validation

Checks user-supplied channel handles/URLs, channel IDs and day windows.
All checks run before any network call.
"""

import re
from typing import Union
from urllib.parse import unquote

from .exceptions import ValidationError

MIN_DAYS = 1
MAX_DAYS = 365

# Shell/HTML metacharacters never belong in a handle
_DANGEROUS_CHARS_RE = re.compile(r"""[;&|`$(){}\[\]<>\\'"]""")
_HANDLE_RE = re.compile(r"^@?[\w.\-]+$")
_YOUTUBE_URL_RE = re.compile(r"^https?://(www\.|m\.)?(youtube\.com|youtu\.be)/.+", re.IGNORECASE)
_CHANNEL_ID_RE = re.compile(r"^(UC[\w-]{22}|mock-\d+)$")


def sanitize_input(value: str) -> str:
    """Strip characters that are dangerous in shell or markup contexts."""
    if not isinstance(value, str):
        return ""
    return _DANGEROUS_CHARS_RE.sub("", value)


def validate_channel_input(value: str) -> str:
    """
    Validate a channel handle (``@name`` or bare ``name``) or YouTube URL.

    Percent-encoded handles (e.g. Korean handles pasted from a browser)
    are decoded first.

    Returns:
        The decoded, trimmed input.

    Raises:
        ValidationError: if the input is empty or not a handle/YouTube URL.
    """
    if not value or not isinstance(value, str):
        raise ValidationError("Channel URL or handle is required")

    decoded = unquote(value.strip())
    if not decoded:
        raise ValidationError("Channel URL or handle is required")

    if _YOUTUBE_URL_RE.match(decoded):
        if "@" not in decoded:
            raise ValidationError("YouTube URL must contain a channel @handle")
        return decoded

    if _HANDLE_RE.match(decoded):
        return decoded

    raise ValidationError(f"Invalid YouTube channel URL or handle: {value}")


def extract_handle(value: str) -> str:
    """
    Extract a ``@handle`` from a channel URL or handle.

    Examples:
        https://www.youtube.com/@demo/videos -> @demo
        demo -> @demo
    """
    decoded = unquote(value.strip())

    if "@" in decoded:
        handle = "@" + decoded.split("@", 1)[1].split("/")[0].split("?")[0]
    else:
        handle = decoded

    if not handle.startswith("@"):
        handle = "@" + handle

    return sanitize_input(handle)


def validate_days(days: Union[int, str, None]) -> int:
    """Validate the recency window. Must be an integer in 1..365."""
    if isinstance(days, bool):
        raise ValidationError(f"Days must be a number between {MIN_DAYS} and {MAX_DAYS}")
    try:
        parsed = int(days)
    except (TypeError, ValueError):
        raise ValidationError(f"Days must be a number between {MIN_DAYS} and {MAX_DAYS}")

    if parsed < MIN_DAYS or parsed > MAX_DAYS:
        raise ValidationError(f"Days must be a number between {MIN_DAYS} and {MAX_DAYS}")

    return parsed


def validate_channel_id(channel_id: str) -> bool:
    """YouTube channel IDs are ``UC`` + 22 chars; placeholder IDs are ``mock-<ms>``."""
    if not channel_id or not isinstance(channel_id, str):
        return False
    return bool(_CHANNEL_ID_RE.match(channel_id))
