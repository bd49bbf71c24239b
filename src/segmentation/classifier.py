"""Heuristic layout classifier for fragments without an external region."""

from __future__ import annotations

import re

from schemas.internal.layout import RegionType, TextFragment

DEFAULT_FONT_SIZE = 12.0
TITLE_MIN_FONT_SIZE = 20.0
TITLE_MAX_CHARS = 100
CAPTION_MAX_CHARS = 200

_BULLET_LINE = re.compile(r"^\s*[-*]", re.MULTILINE)
_CAPTION_WORD = re.compile(r"\b(?:figure|table)s?\b", re.IGNORECASE)


def classify(fragment: TextFragment) -> RegionType:
    """Map a fragment to a layout category.

    Rules are evaluated in priority order: title, bullet list, caption, body.
    """
    text = fragment.text or ""
    font_size = fragment.font_size if fragment.font_size is not None else DEFAULT_FONT_SIZE
    is_bold = bool(fragment.is_bold)

    if font_size >= TITLE_MIN_FONT_SIZE or is_bold:
        if len(text) < TITLE_MAX_CHARS and "." not in text:
            return "title_group"

    if _has_bullet_marker(text):
        return "bullet_list"

    if len(text) < CAPTION_MAX_CHARS and _CAPTION_WORD.search(text):
        return "caption"

    return "body_text"


def _has_bullet_marker(text: str) -> bool:
    return "•" in text or bool(_BULLET_LINE.search(text))


__all__ = ["DEFAULT_FONT_SIZE", "classify"]
