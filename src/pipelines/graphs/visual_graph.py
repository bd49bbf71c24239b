"""Visual segmentation LangGraph workflow.

upload -> extracting_layout -> region_analysis -> segment_building ->
optimizing -> ready_for_review. Any node error becomes a
SegmentationPipelineError tagged with the stage; region analysis failures
for single slides are handled inside the node as fallbacks.
"""

from __future__ import annotations

import operator
from typing import Annotated, Any, Callable, Literal, cast

from typing_extensions import TypedDict

from langgraph.graph import END, START, StateGraph

from core.exceptions import SegmentationPipelineError, TransegError
from pipelines.graphs.nodes.layout import extract_layout_node
from pipelines.graphs.nodes.regions import region_analysis_node
from pipelines.graphs.nodes.segments import optimizing_node, segment_building_node

VisualStatus = Literal[
    "upload",
    "extracting_layout",
    "region_analysis",
    "segment_building",
    "optimizing",
    "ready_for_review",
    "exported",
    "failed",
]


class VisualGraphState(TypedDict, total=False):
    file_path: str
    file_name: str
    canvas_width: int
    render_images: bool

    region_analysis: Literal["llm", "none"]
    visual_llm: object
    visual_model: str
    visual_model_provider: str
    visual_temperature: float
    visual_timeout: float
    visual_max_tokens: int
    visual_max_retries: int
    visual_include_image: bool
    visual_request_interval: float

    merge_distance_threshold: float
    semantic_merge_distance: float

    slides: list[dict]
    region_analysis_report: dict
    segment_ids: object
    candidate_segments: list[dict]
    segments: list[dict]

    status: VisualStatus
    warnings: Annotated[list[str], operator.add]


NodeFn = object

_STAGES = (
    ("extract_layout", "extracting_layout", extract_layout_node),
    ("analyze_regions", "region_analysis", region_analysis_node),
    ("segment_building", "segment_building", segment_building_node),
    ("optimizing", "optimizing", optimizing_node),
)


def _staged(stage: str, node: Callable[[dict], dict]) -> Callable[[dict], dict]:
    def run(state: dict) -> dict:
        try:
            return node(state)
        except TransegError:
            raise
        except Exception as exc:
            raise SegmentationPipelineError(f"{stage} failed: {exc}", stage=stage) from exc

    return run


def build_visual_graph(*, node_overrides: dict[str, NodeFn] | None = None):
    """Build and compile the visual segmentation workflow graph."""
    overrides = node_overrides or {}
    builder = StateGraph(VisualGraphState)

    previous = START
    for name, stage, default in _STAGES:
        node = cast(Callable[[dict], dict], overrides.get(name) or default)
        builder.add_node(name, cast(Any, _staged(stage, node)))
        builder.add_edge(previous, name)
        previous = name
    builder.add_edge(previous, END)

    return builder.compile()


__all__ = ["VisualGraphState", "VisualStatus", "build_visual_graph"]
