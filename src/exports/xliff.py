"""XLIFF 1.2 rendering for reviewed segments."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from jinja2 import Environment, FileSystemLoader, select_autoescape

from schemas.internal.segments import Segment

XLIFF_TEMPLATE = "xliff.xml.j2"


def render_xliff(
    segments: Iterable[Segment],
    *,
    source_language: str,
    target_language: str,
    original: str = "document",
) -> str:
    """One ``trans-unit`` per segment; targets only where a translation exists."""
    template = _environment().get_template(XLIFF_TEMPLATE)
    return template.render(
        segments=list(segments),
        source_language=source_language,
        target_language=target_language,
        original=original,
    )


def _environment() -> Environment:
    template_dir = Path(__file__).parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(enabled_extensions=("j2", "xml"), default=True),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


__all__ = ["render_xliff"]
