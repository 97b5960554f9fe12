"""Sanitisation helpers.

Free-text fields (check-in comments, organization and group names) are
stripped of HTML tags and surrounding whitespace before they are stored,
because manager dashboards render them back to a browser.
"""
from __future__ import annotations

import re
from typing import Optional

TAG_RE = re.compile(r"<[^>]+>")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def strip_tags(text: Optional[str]) -> str:
    """Remove HTML tags from ``text`` and trim whitespace.

    ``None`` and empty strings come back as ``""``.
    """
    if not text:
        return ""
    return TAG_RE.sub("", text).strip()


def clean_optional_text(text: Optional[str]) -> Optional[str]:
    """Like :func:`strip_tags` but maps blank results to ``None``."""
    cleaned = strip_tags(text)
    return cleaned or None


def normalise_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))
