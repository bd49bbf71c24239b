"""Two-stage glossary analysis: document context, then untranslatable terms.

Stage 2 always receives the stage 1 context. A failure in either stage is
fatal for the document; there is no heuristic substitute for either call.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from analysis.llm import ChatModelLike, build_messages, invoke_json_model
from core.exceptions import DocumentAnalysisError
from schemas.internal.glossary import TERM_CATEGORIES, DocumentContext, GlossaryTerm
from schemas.responses import GlossaryAnalysisResult
from transeg.telemetry import traceable_if_enabled

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_MAX_CHARS = 2000

_CONFIDENCE_LEVELS = ("high", "medium", "low")
_FIRST_NUMBER = re.compile(r"\d+")

CONTEXT_SYSTEM_PROMPT = """You profile documents before translation.
Analyze the text and return ONLY a JSON object with these keys:

- origin: company/organization/institution name
- author_role: likely role of the author (e.g. product manager, marketer, engineer)
- target_audience: who the document is written for
- time_context: when it was likely written or the relevant time period
- domain: industry or field (tech, healthcare, finance, ...)
- document_type: marketing copy, technical docs, internal memo, ...
- geographic_context: target market or region
- formality_level: casual, professional, academic, or legal
- technical_depth: layperson, intermediate, or expert
- business_stage: startup, scale-up, enterprise, or government
- regulatory_context: compliance requirements mentioned, if any
- potential_terms: list of terms likely to be glossary candidates

No commentary, no markdown."""

TERMS_SYSTEM_PROMPT = """You build translation glossaries.
Identify ALL terms in the text that should NOT be translated:
1. Company/organization names
2. Product names and features
3. Technical terms that should remain in English
4. Acronyms
5. Any other context-specific terms that would lose meaning if translated

For each term return:
- term: the exact term as it appears
- category: one of [company, product, technical, acronym, other]
- confidence: one of [high, medium, low]
- context: a short snippet showing how it is used
- frequency: approximate number of occurrences

Be comprehensive but accurate.
Return ONLY a JSON object of the form {"terms": [...]}."""


class _ExtractedTerm(BaseModel):
    term: str = ""
    category: str = "other"
    confidence: str = "medium"
    context: Optional[str] = None
    frequency: int | str | None = None

    model_config = ConfigDict(extra="ignore")


class _TermsResponse(BaseModel):
    terms: List[_ExtractedTerm] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


@traceable_if_enabled(name="Document Context", run_type="llm")
def infer_document_context(
    text: str,
    *,
    llm: ChatModelLike,
    max_chars: int = DEFAULT_CONTEXT_MAX_CHARS,
) -> DocumentContext:
    """Profile the document from its opening ``max_chars`` characters."""
    excerpt = text[:max_chars]
    messages = build_messages(
        CONTEXT_SYSTEM_PROMPT, f"Text to analyze:\n{excerpt}"
    )
    return invoke_json_model(llm, messages, DocumentContext, label="Document context")


@traceable_if_enabled(name="Glossary Terms", run_type="llm")
def extract_glossary_terms(
    text: str,
    context: DocumentContext,
    *,
    llm: ChatModelLike,
    id_prefix: str | None = None,
) -> List[GlossaryTerm]:
    """Extract untranslatable terms from the full text, guided by ``context``."""
    messages = build_messages(TERMS_SYSTEM_PROMPT, build_terms_prompt(text, context))
    response = invoke_json_model(llm, messages, _TermsResponse, label="Glossary terms")
    token = id_prefix or str(int(time.time() * 1000))
    return normalize_terms(response.terms, id_prefix=token)


def build_terms_prompt(text: str, context: DocumentContext) -> str:
    summary = "\n".join(f"{key}: {value}" for key, value in context.summary_items())
    expected = ", ".join(context.potential_terms) or "None identified"
    example = context.potential_terms[0] if context.potential_terms else "API"
    return (
        "You are analyzing a document with the following context:\n"
        f"{summary or 'No context available'}\n\n"
        f"Expected terms based on context: {expected}\n"
        f'Include terms like "{example}" if they appear.\n\n'
        f"Text to analyze:\n{text}"
    )


def normalize_terms(raw_terms: List[_ExtractedTerm], *, id_prefix: str) -> List[GlossaryTerm]:
    terms: List[GlossaryTerm] = []
    for raw in raw_terms:
        term = raw.term.strip()
        if not term:
            continue
        category = raw.category.strip().lower()
        confidence = raw.confidence.strip().lower()
        terms.append(
            GlossaryTerm(
                id=f"term-{id_prefix}-{len(terms)}",
                term=term,
                category=category if category in TERM_CATEGORIES else "other",
                confidence=confidence if confidence in _CONFIDENCE_LEVELS else "medium",
                context=(raw.context or "").strip() or None,
                frequency=_coerce_frequency(raw.frequency),
            )
        )
    return terms


def _coerce_frequency(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    match = _FIRST_NUMBER.search(str(value))
    return int(match.group(0)) if match else None


def run_context_stage(
    text: str,
    *,
    llm: ChatModelLike,
    max_chars: int = DEFAULT_CONTEXT_MAX_CHARS,
) -> DocumentContext:
    """Stage 1, with any failure raised as ``DocumentAnalysisError``."""
    logger.info("Extracting document context")
    try:
        return infer_document_context(text, llm=llm, max_chars=max_chars)
    except Exception as exc:
        raise DocumentAnalysisError(
            f"Document context extraction failed: {exc}", stage="context"
        ) from exc


def run_terms_stage(
    text: str,
    context: DocumentContext,
    *,
    llm: ChatModelLike,
    id_prefix: str | None = None,
) -> List[GlossaryTerm]:
    """Stage 2, with any failure raised as ``DocumentAnalysisError``."""
    logger.info("Extracting glossary terms")
    try:
        return extract_glossary_terms(text, context, llm=llm, id_prefix=id_prefix)
    except Exception as exc:
        raise DocumentAnalysisError(
            f"Glossary term extraction failed: {exc}", stage="terms"
        ) from exc


def analyze_document(
    text: str,
    *,
    llm: ChatModelLike,
    context_max_chars: int = DEFAULT_CONTEXT_MAX_CHARS,
    id_prefix: str | None = None,
) -> GlossaryAnalysisResult:
    """Run both stages in order. Stage 2 never runs if stage 1 fails."""
    context = run_context_stage(text, llm=llm, max_chars=context_max_chars)
    terms = run_terms_stage(text, context, llm=llm, id_prefix=id_prefix)
    return GlossaryAnalysisResult(context=context, terms=terms)


__all__ = [
    "CONTEXT_SYSTEM_PROMPT",
    "DEFAULT_CONTEXT_MAX_CHARS",
    "TERMS_SYSTEM_PROMPT",
    "analyze_document",
    "build_terms_prompt",
    "extract_glossary_terms",
    "infer_document_context",
    "normalize_terms",
    "run_context_stage",
    "run_terms_stage",
]
