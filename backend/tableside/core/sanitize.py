"""Normalisation of free text and customer identifiers from the public menu."""

import html
import re

_WHITESPACE = re.compile(r"\s+")
_PHONE_NOISE = re.compile(r"[\s\-().]")


def sanitize_text(value: str | None) -> str | None:
    """HTML-escape and collapse whitespace in user-supplied text.

    Comments and names typed at the table end up on the staff screens, so
    they are escaped before being stored.
    """
    if value is None:
        return None
    value = _WHITESPACE.sub(" ", value).strip()
    return html.escape(value, quote=True) or None


def normalize_customer_id(value: str) -> str:
    """Canonical loyalty key: lower-cased e-mail, or a phone number without separators."""
    value = value.strip()
    if "@" in value:
        return value.lower()
    return _PHONE_NOISE.sub("", value)
