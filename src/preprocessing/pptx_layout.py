"""Layout extraction from .pptx presentations.

Shape positions come in EMU and are scaled onto a canvas ``canvas_width``
pixels wide, keeping the slide's aspect ratio.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from pptx import Presentation
from pptx.enum.dml import MSO_COLOR_TYPE

from core.exceptions import InputValidationError
from preprocessing.slide_image import render_layout_image
from schemas.internal.layout import BoundingBox, SlideData, TextFragment

logger = logging.getLogger(__name__)

DEFAULT_SLIDE_WIDTH_EMU = 9144000
DEFAULT_SLIDE_HEIGHT_EMU = 6858000


def extract_slides(
    path: Path | str,
    *,
    file_name: str | None = None,
    canvas_width: int = 800,
    render_images: bool = True,
) -> List[SlideData]:
    """Read every slide's text shapes into ``SlideData`` records."""
    source = Path(path)
    name = file_name or source.name
    try:
        presentation = Presentation(str(source))
    except Exception as exc:
        raise InputValidationError(f"Failed to parse .pptx file: {exc}") from exc

    slide_width = presentation.slide_width or DEFAULT_SLIDE_WIDTH_EMU
    slide_height = presentation.slide_height or DEFAULT_SLIDE_HEIGHT_EMU
    scale = canvas_width / slide_width
    canvas_height = max(int(round(slide_height * scale)), 1)

    slides: List[SlideData] = []
    for slide_id, slide in enumerate(presentation.slides, start=1):
        fragments = _slide_fragments(slide_id, slide.shapes, scale)
        image = (
            render_layout_image(fragments, width=canvas_width, height=canvas_height)
            if render_images
            else ""
        )
        slides.append(
            SlideData(
                slide_id=slide_id,
                slide_image=image,
                text_elements=fragments,
                overall_context=f"Slide {slide_id} of {name}",
            )
        )
        logger.debug("Slide %s: %d text element(s)", slide_id, len(fragments))

    return slides


def _slide_fragments(slide_id: int, shapes: Iterable, scale: float) -> List[TextFragment]:
    fragments: List[TextFragment] = []
    for shape in shapes:
        text = _shape_text(shape)
        if not text:
            continue
        style = _first_run_style(shape)
        fragments.append(
            TextFragment(
                id=f"s{slide_id}_tb{len(fragments) + 1}",
                text=text,
                bounding_box=_shape_box(shape, scale),
                **style,
            )
        )
    return fragments


def _shape_text(shape) -> str:
    if getattr(shape, "has_text_frame", False) and shape.has_text_frame:
        return shape.text_frame.text.strip()
    if getattr(shape, "has_table", False) and shape.has_table:
        rows = [
            "\t".join(cell.text.strip() for cell in row.cells) for row in shape.table.rows
        ]
        return "\n".join(row for row in rows if row.strip()).strip()
    return ""


def _shape_box(shape, scale: float) -> BoundingBox:
    def scaled(value: Optional[int]) -> float:
        return round(max(value or 0, 0) * scale, 2)

    return BoundingBox(
        x=scaled(shape.left),
        y=scaled(shape.top),
        width=scaled(shape.width),
        height=scaled(shape.height),
    )


def _first_run_style(shape) -> dict:
    style: dict = {
        "font_size": None,
        "font_family": None,
        "color": None,
        "is_bold": False,
        "is_italic": False,
    }
    if not (getattr(shape, "has_text_frame", False) and shape.has_text_frame):
        return style

    for paragraph in shape.text_frame.paragraphs:
        for run in paragraph.runs:
            font = run.font
            if style["font_size"] is None and font.size is not None:
                style["font_size"] = font.size.pt
            if style["font_family"] is None and font.name:
                style["font_family"] = font.name
            if style["color"] is None:
                style["color"] = _run_color(font)
            if font.bold:
                style["is_bold"] = True
            if font.italic:
                style["is_italic"] = True
    return style


def _run_color(font) -> str | None:
    try:
        if font.color.type == MSO_COLOR_TYPE.RGB:
            return f"#{font.color.rgb}"
    except AttributeError:
        return None
    return None


__all__ = ["extract_slides"]
