"""Glossary analysis runner service for CLI/API reuse."""

from __future__ import annotations

import logging
from pathlib import Path
from time import perf_counter
from typing import Any, Mapping

from analysis.llm import analysis_llm_config, init_chat_model
from core.config import get_settings
from core.exceptions import DocumentAnalysisError, InputValidationError
from pipelines.graphs.glossary_graph import build_glossary_graph
from preprocessing.text_extract import extract_text
from schemas.internal.glossary import DocumentContext, GlossaryTerm
from schemas.requests import DocumentInput, GlossaryOptions
from schemas.responses import GlossaryAnalysisResult
from services.io import GLOSSARY_EXTENSIONS, validate_upload
from services.options import resolve_int, resolve_optional_float, resolve_optional_int, resolve_str

logger = logging.getLogger(__name__)


def run_glossary_analysis(
    input_data: DocumentInput | Mapping[str, Any],
    options: GlossaryOptions | Mapping[str, Any] | None = None,
    *,
    state_overrides: Mapping[str, Any] | None = None,
) -> GlossaryAnalysisResult:
    """Extract text, run the glossary graph, and return context plus terms.

    Raises InputValidationError before any model call for bad uploads, and
    DocumentAnalysisError when either analysis stage fails.
    """
    input_obj = (
        input_data
        if isinstance(input_data, DocumentInput)
        else DocumentInput.model_validate(input_data)
    )
    options_obj = (
        options
        if isinstance(options, GlossaryOptions)
        else GlossaryOptions.model_validate(options or {})
    )
    settings = get_settings()
    file_name = input_obj.display_name

    if input_obj.data is not None:
        data = input_obj.data
    else:
        path = Path(str(input_obj.path))
        if not path.is_file():
            raise InputValidationError(f"File not found: {path}")
        data = path.read_bytes()
    validate_upload(
        file_name,
        len(data),
        allowed=GLOSSARY_EXTENSIONS,
        max_bytes=settings.max_upload_bytes,
    )
    text = extract_text(data, file_name)

    start = perf_counter()
    state = _build_run_state(text, file_name, options_obj)
    state.update(state_overrides or {})
    if state.get("analysis_llm") is None:
        state["analysis_llm"] = init_chat_model(
            analysis_llm_config(
                settings,
                model=state.get("analysis_model"),
                model_provider=state.get("analysis_model_provider"),
                temperature=state.get("analysis_temperature"),
                timeout=state.get("analysis_timeout"),
                max_tokens=state.get("analysis_max_tokens"),
                max_retries=state.get("analysis_max_retries"),
            )
        )

    final_state = build_glossary_graph().invoke(state)
    if final_state.get("status") == "failed":
        stage = final_state.get("failed_stage")
        message = final_state.get("error") or f"Glossary analysis failed during {stage}"
        raise DocumentAnalysisError(message, stage=stage)

    runtime_ms = int((perf_counter() - start) * 1000)
    terms = [GlossaryTerm.model_validate(item) for item in final_state.get("terms") or []]
    logger.info("Glossary analysis of %s: %d term(s) in %d ms", file_name, len(terms), runtime_ms)
    return GlossaryAnalysisResult(
        context=DocumentContext.model_validate(final_state.get("context") or {}),
        terms=terms,
        runtime_ms=runtime_ms,
    )


def _build_run_state(text: str, file_name: str, options: GlossaryOptions) -> dict[str, Any]:
    settings = get_settings()
    return {
        "text": text,
        "file_name": file_name,
        "analysis_model": resolve_str(options.analysis_model)
        or resolve_str(settings.analysis_model),
        "analysis_model_provider": resolve_str(options.analysis_model_provider)
        or resolve_str(settings.analysis_model_provider),
        "analysis_temperature": resolve_optional_float(
            options.analysis_temperature, settings.analysis_temperature
        ),
        "analysis_timeout": resolve_optional_float(
            options.analysis_timeout, settings.analysis_timeout
        ),
        "analysis_max_tokens": resolve_optional_int(
            options.analysis_max_tokens, settings.analysis_max_tokens
        ),
        "analysis_max_retries": resolve_int(
            options.analysis_max_retries, settings.analysis_max_retries
        ),
        "context_max_chars": resolve_int(options.context_max_chars, settings.context_max_chars),
        "status": "context_extracting",
    }


__all__ = ["run_glossary_analysis"]
