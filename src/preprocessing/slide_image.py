"""Synthetic slide preview drawn from fragment boxes.

No real rendering happens here: the image shows where each text fragment
sits, which is what region analysis needs from it.
"""

from __future__ import annotations

import base64
import io
from typing import Iterable

from PIL import Image, ImageDraw, ImageFont

from schemas.internal.layout import TextFragment

BACKGROUND = "#f0f0f0"
BORDER = "#cccccc"
BOX_OUTLINE = "#4a90d9"
BOX_FILL = "#ffffff"
TEXT_COLOR = "#333333"
LABEL_MAX_CHARS = 60


def render_layout_image(
    fragments: Iterable[TextFragment],
    *,
    width: int = 800,
    height: int = 600,
) -> str:
    """Return a PNG data URL with one labelled box per fragment."""
    image = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    draw.rectangle([0, 0, width - 1, height - 1], outline=BORDER, width=2)
    font = ImageFont.load_default()

    for fragment in fragments:
        box = fragment.bounding_box
        left, top = box.x, box.y
        right, bottom = box.x + box.width, box.y + box.height
        draw.rectangle([left, top, right, bottom], outline=BOX_OUTLINE, fill=BOX_FILL)
        draw.text((left + 4, top + 4), _label(fragment.text), fill=TEXT_COLOR, font=font)

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def _label(text: str) -> str:
    first_line = (text or "").strip().split("\n", 1)[0]
    if len(first_line) > LABEL_MAX_CHARS:
        first_line = first_line[: LABEL_MAX_CHARS - 3] + "..."
    # The bundled bitmap font only covers latin-1.
    return first_line.encode("latin-1", "replace").decode("latin-1")


__all__ = ["render_layout_image"]
