"""Layout extraction node for the visual segmentation graph."""

from __future__ import annotations

from preprocessing.pptx_layout import extract_slides


def extract_layout_node(state: dict) -> dict:
    file_path = state.get("file_path")
    if not file_path:
        raise ValueError("extract_layout_node requires 'file_path'.")

    render_images = state.get("render_images")
    slides = extract_slides(
        str(file_path),
        file_name=state.get("file_name"),
        canvas_width=int(state.get("canvas_width") or 800),
        render_images=True if render_images is None else bool(render_images),
    )
    return {
        "slides": [slide.model_dump() for slide in slides],
        "status": "region_analysis",
    }


__all__ = ["extract_layout_node"]
