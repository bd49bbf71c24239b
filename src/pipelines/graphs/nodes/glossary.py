"""Document context and term extraction nodes.

Stage failures are recorded in state instead of raised so the graph can
route to its terminal ``failed`` state. A missing model configuration is
raised before any call is attempted.
"""

from __future__ import annotations

import logging

from analysis.glossary import (
    DEFAULT_CONTEXT_MAX_CHARS,
    run_context_stage,
    run_terms_stage,
)
from analysis.llm import ChatModelLike, analysis_llm_config, init_chat_model
from core.config import get_settings
from core.exceptions import DocumentAnalysisError
from schemas.internal.glossary import DocumentContext

logger = logging.getLogger(__name__)


def context_extraction_node(state: dict) -> dict:
    text = state.get("text")
    if not text:
        raise ValueError("context_extraction_node requires 'text'.")

    llm = _analysis_llm(state)
    max_chars = int(state.get("context_max_chars") or DEFAULT_CONTEXT_MAX_CHARS)
    try:
        context = run_context_stage(text, llm=llm, max_chars=max_chars)
    except DocumentAnalysisError as exc:
        return _failed(exc)

    return {"context": context.model_dump(), "status": "term_extracting"}


def term_extraction_node(state: dict) -> dict:
    text = state.get("text")
    raw_context = state.get("context")
    if not text or raw_context is None:
        raise ValueError("term_extraction_node requires 'text' and 'context'.")

    llm = _analysis_llm(state)
    context = DocumentContext.model_validate(raw_context)
    try:
        terms = run_terms_stage(
            text, context, llm=llm, id_prefix=state.get("term_id_prefix")
        )
    except DocumentAnalysisError as exc:
        return _failed(exc)

    return {"terms": [term.model_dump() for term in terms], "status": "done"}


def _failed(exc: DocumentAnalysisError) -> dict:
    logger.warning("%s", exc)
    return {"status": "failed", "failed_stage": exc.stage, "error": str(exc)}


def _analysis_llm(state: dict) -> ChatModelLike:
    llm = state.get("analysis_llm")
    if llm is not None:
        return llm
    config = analysis_llm_config(
        get_settings(),
        model=state.get("analysis_model"),
        model_provider=state.get("analysis_model_provider"),
        temperature=state.get("analysis_temperature"),
        timeout=state.get("analysis_timeout"),
        max_tokens=state.get("analysis_max_tokens"),
        max_retries=state.get("analysis_max_retries"),
    )
    return init_chat_model(config)


__all__ = ["context_extraction_node", "term_extraction_node"]
