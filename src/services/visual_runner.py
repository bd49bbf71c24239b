"""Visual segmentation runner service for CLI/API reuse."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter
from typing import Any, Mapping

from core.config import get_settings
from core.exceptions import InputValidationError
from pipelines.graphs.visual_graph import build_visual_graph
from schemas.internal.layout import SlideData
from schemas.internal.segments import Segment
from schemas.requests import DocumentInput, SegmentationOptions
from schemas.responses import PowerPointAnalysis, VisualAnalysisResult
from services.io import PRESENTATION_EXTENSIONS, temp_upload, validate_upload
from services.options import (
    resolve_bool,
    resolve_choice,
    resolve_float,
    resolve_int,
    resolve_optional_float,
    resolve_optional_int,
    resolve_str,
)

logger = logging.getLogger(__name__)


def run_visual_segmentation(
    input_data: DocumentInput | Mapping[str, Any],
    options: SegmentationOptions | Mapping[str, Any] | None = None,
    *,
    state_overrides: Mapping[str, Any] | None = None,
) -> VisualAnalysisResult:
    """Run the visual segmentation graph on a .pptx and return a typed result."""
    input_obj = (
        input_data
        if isinstance(input_data, DocumentInput)
        else DocumentInput.model_validate(input_data)
    )
    options_obj = (
        options
        if isinstance(options, SegmentationOptions)
        else SegmentationOptions.model_validate(options or {})
    )
    settings = get_settings()
    file_name = input_obj.display_name

    start = perf_counter()
    if input_obj.data is not None:
        validate_upload(
            file_name,
            len(input_obj.data),
            allowed=PRESENTATION_EXTENSIONS,
            max_bytes=settings.max_upload_bytes,
        )
        with temp_upload(input_obj.data, filename=file_name) as path:
            final_state = _invoke_graph(
                _build_run_state(str(path), file_name, options_obj, state_overrides)
            )
    else:
        path = Path(str(input_obj.path))
        if not path.is_file():
            raise InputValidationError(f"File not found: {path}")
        validate_upload(
            file_name,
            path.stat().st_size,
            allowed=PRESENTATION_EXTENSIONS,
            max_bytes=settings.max_upload_bytes,
        )
        final_state = _invoke_graph(
            _build_run_state(str(path), file_name, options_obj, state_overrides)
        )

    runtime_ms = int((perf_counter() - start) * 1000)
    return _build_result(final_state, file_name, runtime_ms)


def _invoke_graph(state: dict[str, Any]) -> dict[str, Any]:
    app = build_visual_graph()
    return app.invoke(state)


def _build_run_state(
    file_path: str,
    file_name: str,
    options: SegmentationOptions,
    state_overrides: Mapping[str, Any] | None,
) -> dict[str, Any]:
    settings = get_settings()
    state: dict[str, Any] = {
        "file_path": file_path,
        "file_name": file_name,
        "canvas_width": settings.canvas_width,
        "region_analysis": resolve_choice(options.region_analysis, "llm"),
        "visual_model": resolve_str(options.visual_model) or resolve_str(settings.visual_model),
        "visual_model_provider": resolve_str(options.visual_model_provider)
        or resolve_str(settings.visual_model_provider),
        "visual_temperature": resolve_optional_float(
            options.visual_temperature, settings.visual_temperature
        ),
        "visual_timeout": resolve_optional_float(options.visual_timeout, settings.visual_timeout),
        "visual_max_tokens": resolve_optional_int(
            options.visual_max_tokens, settings.visual_max_tokens
        ),
        "visual_max_retries": resolve_int(options.visual_max_retries, settings.visual_max_retries),
        "visual_include_image": resolve_bool(
            options.visual_include_image, settings.visual_include_image
        ),
        "visual_request_interval": resolve_float(
            options.visual_request_interval, settings.visual_request_interval
        ),
        "merge_distance_threshold": resolve_float(
            options.merge_distance_threshold, settings.merge_distance_threshold
        ),
        "semantic_merge_distance": resolve_float(
            options.semantic_merge_distance, settings.semantic_merge_distance
        ),
        "status": "extracting_layout",
        "warnings": [],
    }
    state.update(state_overrides or {})
    return state


def _build_result(
    final_state: Mapping[str, Any],
    file_name: str,
    runtime_ms: int,
) -> VisualAnalysisResult:
    slides = [SlideData.model_validate(item) for item in final_state.get("slides") or []]
    segments = [Segment.model_validate(item) for item in final_state.get("segments") or []]
    analysis = PowerPointAnalysis(
        file_name=file_name,
        slides=slides,
        total_slides=len(slides),
        analysis_timestamp=datetime.now(timezone.utc).isoformat(),
    )
    logger.info(
        "Visual segmentation of %s: %d slide(s), %d segment(s) in %d ms",
        file_name,
        len(slides),
        len(segments),
        runtime_ms,
    )
    return VisualAnalysisResult(
        analysis=analysis,
        segments=segments,
        runtime_ms=runtime_ms,
        warnings=list(final_state.get("warnings") or []),
    )


__all__ = ["run_visual_segmentation"]
