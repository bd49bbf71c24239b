from __future__ import annotations

import json

import pytest

from core.exceptions import DocumentAnalysisError, InputValidationError, ModelNotConfiguredError
from pipelines.graphs.glossary_graph import build_glossary_graph
from services.glossary_runner import run_glossary_analysis

CONTEXT_REPLY = json.dumps({"origin": "Acme Corp", "domain": "tech", "potential_terms": ["Acme"]})
TERMS_REPLY = json.dumps(
    {"terms": [{"term": "Acme", "category": "company", "confidence": "high", "frequency": 2}]}
)


def test_runner_returns_context_and_terms(dummy_llm) -> None:
    llm = dummy_llm([CONTEXT_REPLY, TERMS_REPLY])

    result = run_glossary_analysis(
        {"data": b"Acme makes Acme products.", "filename": "notes.txt"},
        state_overrides={"analysis_llm": llm, "term_id_prefix": "run"},
    )

    assert result.context.origin == "Acme Corp"
    assert [term.id for term in result.terms] == ["term-run-0"]
    assert result.terms[0].frequency == 2
    assert result.runtime_ms is not None
    assert len(llm.calls) == 2


def test_runner_stops_after_failed_context_stage(dummy_llm) -> None:
    llm = dummy_llm(["not json at all", TERMS_REPLY])

    with pytest.raises(DocumentAnalysisError) as excinfo:
        run_glossary_analysis(
            {"data": b"Some text", "filename": "notes.txt"},
            state_overrides={"analysis_llm": llm},
        )

    assert excinfo.value.stage == "context"
    assert len(llm.calls) == 1


def test_runner_reports_term_stage_failure(dummy_llm) -> None:
    llm = dummy_llm([CONTEXT_REPLY, RuntimeError("rate limited")])

    with pytest.raises(DocumentAnalysisError) as excinfo:
        run_glossary_analysis(
            {"data": b"Some text", "filename": "notes.txt"},
            state_overrides={"analysis_llm": llm},
        )

    assert excinfo.value.stage == "terms"
    assert str(excinfo.value) == "Glossary term extraction failed: rate limited"


def test_runner_requires_a_configured_model() -> None:
    with pytest.raises(ModelNotConfiguredError):
        run_glossary_analysis({"data": b"Some text", "filename": "notes.txt"})


def test_runner_rejects_bad_input_before_model_calls(dummy_llm, tmp_path) -> None:
    llm = dummy_llm([])
    with pytest.raises(InputValidationError, match="Invalid file type"):
        run_glossary_analysis(
            {"data": b"x", "filename": "deck.pptx"}, state_overrides={"analysis_llm": llm}
        )
    with pytest.raises(InputValidationError, match="File not found"):
        run_glossary_analysis(
            {"path": str(tmp_path / "missing.txt")}, state_overrides={"analysis_llm": llm}
        )
    assert llm.calls == []


def test_graph_routes_failure_to_end() -> None:
    calls = []

    def failing_context(state):
        calls.append("context")
        return {"status": "failed", "failed_stage": "context", "error": "boom"}

    def term_node(state):
        calls.append("terms")
        return {"terms": [], "status": "done"}

    app = build_glossary_graph(
        node_overrides={"context_extraction": failing_context, "term_extraction": term_node}
    )
    final = app.invoke({"text": "hello", "status": "context_extracting"})

    assert final["status"] == "failed"
    assert calls == ["context"]
