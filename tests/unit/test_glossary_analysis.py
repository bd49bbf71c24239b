from __future__ import annotations

import json

import pytest

from analysis.glossary import (
    _ExtractedTerm,
    analyze_document,
    build_terms_prompt,
    normalize_terms,
)
from core.exceptions import DocumentAnalysisError
from schemas.internal.glossary import DocumentContext

CONTEXT_REPLY = json.dumps(
    {
        "origin": "Acme Corp",
        "targetAudience": "enterprise buyers",
        "domain": "tech",
        "potentialTerms": ["Acme Cloud", "SLA"],
    }
)
TERMS_REPLY = json.dumps(
    {
        "terms": [
            {"term": "Acme Cloud", "category": "product", "confidence": "high", "frequency": 4},
            {"term": "SLA", "category": "Acronym", "confidence": "certain", "frequency": "about 2"},
            {"term": "  ", "category": "other"},
        ]
    }
)


def test_analyze_document_runs_both_stages(dummy_llm) -> None:
    llm = dummy_llm([CONTEXT_REPLY, TERMS_REPLY])

    result = analyze_document("Acme Cloud ships with an SLA.", llm=llm, id_prefix="t1")

    assert result.context.origin == "Acme Corp"
    assert result.context.target_audience == "enterprise buyers"
    assert result.context.potential_terms == ["Acme Cloud", "SLA"]
    assert [term.term for term in result.terms] == ["Acme Cloud", "SLA"]
    assert [term.id for term in result.terms] == ["term-t1-0", "term-t1-1"]
    assert result.terms[1].category == "acronym"
    assert result.terms[1].confidence == "medium"
    assert result.terms[1].frequency == 2

    terms_prompt = llm.calls[1][1].content
    assert "origin: Acme Corp" in terms_prompt
    assert "Expected terms based on context: Acme Cloud, SLA" in terms_prompt


def test_context_failure_stops_before_term_extraction(dummy_llm) -> None:
    llm = dummy_llm(["I cannot help with that.", TERMS_REPLY])

    with pytest.raises(DocumentAnalysisError) as excinfo:
        analyze_document("Some text", llm=llm)

    assert excinfo.value.stage == "context"
    assert len(llm.calls) == 1


def test_term_failure_is_reported_with_stage(dummy_llm) -> None:
    llm = dummy_llm([CONTEXT_REPLY, RuntimeError("rate limited")])

    with pytest.raises(DocumentAnalysisError, match="rate limited") as excinfo:
        analyze_document("Some text", llm=llm)

    assert excinfo.value.stage == "terms"


def test_context_uses_only_leading_characters(dummy_llm) -> None:
    llm = dummy_llm([CONTEXT_REPLY, TERMS_REPLY])

    analyze_document("a" * 50 + "b" * 50, llm=llm, context_max_chars=50)

    context_prompt = llm.calls[0][1].content
    assert "a" * 50 in context_prompt
    assert "b" not in context_prompt.split("Text to analyze:")[1]


def test_build_terms_prompt_without_context() -> None:
    prompt = build_terms_prompt("body", DocumentContext())

    assert "No context available" in prompt
    assert "Expected terms based on context: None identified" in prompt
    assert 'Include terms like "API"' in prompt


def test_normalize_terms_defaults_unknown_values() -> None:
    terms = normalize_terms(
        [
            _ExtractedTerm(term="Widget", category="gadget", frequency=-3),
            _ExtractedTerm(term="GDPR", category="acronym", context="  under GDPR  "),
        ],
        id_prefix="x",
    )

    assert terms[0].category == "other"
    assert terms[0].frequency is None
    assert terms[1].context == "under GDPR"
    assert [term.id for term in terms] == ["term-x-0", "term-x-1"]


def test_document_context_accepts_loose_payloads() -> None:
    context = DocumentContext.model_validate(
        {
            "formalityLevel": "professional",
            "regulatoryContext": ["GDPR", "HIPAA"],
            "potential_terms": "API, SDK, ",
            "extraNote": 3,
        }
    )

    assert context.formality_level == "professional"
    assert context.regulatory_context == "GDPR, HIPAA"
    assert context.potential_terms == ["API", "SDK"]
    assert ("extra_note", "3") in context.summary_items()
