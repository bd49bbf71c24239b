"""Glossary LangGraph workflow.

idle -> context_extracting -> term_extracting -> done, with ``failed``
reachable from either extracting state. Term extraction never runs after a
failed context stage.
"""

from __future__ import annotations

from typing import Any, Literal, cast

from typing_extensions import TypedDict

from langgraph.graph import END, START, StateGraph

from pipelines.graphs.nodes.glossary import context_extraction_node, term_extraction_node
from pipelines.graphs.routing import stage_outcome

GlossaryStatus = Literal["idle", "context_extracting", "term_extracting", "done", "failed"]


class GlossaryGraphState(TypedDict, total=False):
    text: str
    file_name: str

    analysis_llm: object
    analysis_model: str
    analysis_model_provider: str
    analysis_temperature: float
    analysis_timeout: float
    analysis_max_tokens: int
    analysis_max_retries: int
    context_max_chars: int
    term_id_prefix: str

    context: dict
    terms: list[dict]

    status: GlossaryStatus
    failed_stage: str
    error: str


NodeFn = object


def build_glossary_graph(*, node_overrides: dict[str, NodeFn] | None = None):
    """Build and compile the glossary workflow graph."""
    overrides = node_overrides or {}
    builder = StateGraph(GlossaryGraphState)

    builder.add_node(
        "context_extraction",
        cast(Any, overrides.get("context_extraction") or context_extraction_node),
    )
    builder.add_node(
        "term_extraction",
        cast(Any, overrides.get("term_extraction") or term_extraction_node),
    )

    builder.add_edge(START, "context_extraction")
    builder.add_conditional_edges(
        "context_extraction",
        stage_outcome,
        {"continue": "term_extraction", "failed": END},
    )
    builder.add_edge("term_extraction", END)

    return builder.compile()


__all__ = ["GlossaryGraphState", "GlossaryStatus", "build_glossary_graph"]
