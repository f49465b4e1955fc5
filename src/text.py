"""Task text helpers: sanitizing, validation, display.

Contract of sanitize_text: the result is trimmed, holds no control
characters (so no terminal escape sequences survive), and has the markup
characters ``&``, ``<`` and ``>`` replaced by their HTML entities. Stored
text therefore can never be interpreted as markup or as terminal control
codes. display_text reverses only the entity escaping.
"""
from __future__ import annotations
import html
import re

from errors import InvalidInput

MAX_TEXT_LENGTH = 500
CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")

MSG_EMPTY = "Please enter a task"
MSG_TOO_LONG = f"Task text is too long (max {MAX_TEXT_LENGTH} characters)"
MSG_DUPLICATE = "This task already exists!"


def sanitize_text(text: str) -> str:
    return html.escape(CONTROL_RE.sub('', text).strip(), quote=False)


def normalize_stored_text(text: str) -> str:
    """Sanitize text read back from storage without double-escaping it."""
    return sanitize_text(html.unescape(text))


def display_text(text: str) -> str:
    return html.unescape(text)


def validate_task_text(text: str, max_length: int = MAX_TEXT_LENGTH) -> str:
    """Return the trimmed text or raise InvalidInput.

    Control characters are dropped before trimming, so text made only of
    them counts as empty. Length is measured on the result, before escaping.
    """
    trimmed = CONTROL_RE.sub('', text).strip()
    if not trimmed:
        raise InvalidInput(MSG_EMPTY)
    if len(trimmed) > max_length:
        raise InvalidInput(f"Task text is too long (max {max_length} characters)")
    return trimmed
