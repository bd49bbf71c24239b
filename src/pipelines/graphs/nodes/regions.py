"""Region analysis node: model-backed regions with per-slide fallback."""

from __future__ import annotations

import logging
from typing import List

from analysis.llm import init_chat_model, visual_llm_config
from analysis.visual import analyze_slides
from core.config import get_settings
from schemas.internal.layout import SlideData
from services.throttle import Throttle

logger = logging.getLogger(__name__)


def region_analysis_node(state: dict) -> dict:
    slides = [SlideData.model_validate(item) for item in state.get("slides") or []]

    requested = str(state.get("region_analysis") or "llm").strip().lower()
    if requested not in {"llm", "none"}:
        raise ValueError("region_analysis must be 'llm' or 'none'")

    llm = state.get("visual_llm") if requested == "llm" else None
    error: str | None = None
    model_name: str | None = None

    if requested == "llm" and llm is None:
        config = visual_llm_config(
            get_settings(),
            model=state.get("visual_model"),
            model_provider=state.get("visual_model_provider"),
            temperature=state.get("visual_temperature"),
            timeout=state.get("visual_timeout"),
            max_tokens=state.get("visual_max_tokens"),
            max_retries=state.get("visual_max_retries"),
        )
        if config is None:
            error = "Missing visual model (set VISUAL_MODEL or state['visual_model'])."
        else:
            model_name = config.model
            try:
                llm = init_chat_model(config)
            except Exception as exc:
                error = f"Visual model unavailable: {exc}"
                logger.warning("Could not initialise visual model %s: %s", config.model, exc)

    interval = float(state.get("visual_request_interval") or 0.0)
    include_image = state.get("visual_include_image")
    analysed = analyze_slides(
        slides,
        llm=llm,
        throttle=Throttle(interval) if llm is not None else None,
        include_image=True if include_image is None else bool(include_image),
        model_name=model_name,
    )

    fallback_slides = [
        slide.slide_id
        for slide in analysed
        if slide.region_analysis is not None and slide.region_analysis.status == "fallback"
    ]
    warnings: List[str] = []
    if error:
        warnings.append(error)
    if llm is not None and fallback_slides:
        warnings.append(
            "Region analysis used the classifier fallback on slide(s): "
            + ", ".join(str(slide_id) for slide_id in fallback_slides)
        )

    return {
        "slides": [slide.model_dump() for slide in analysed],
        "region_analysis_report": {
            "requested": requested,
            "used": "llm" if llm is not None else "none",
            "error": error,
            "fallback_slides": fallback_slides,
        },
        "warnings": warnings,
        "status": "segment_building",
    }


__all__ = ["region_analysis_node"]
