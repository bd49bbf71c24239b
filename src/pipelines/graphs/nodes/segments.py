"""Segment building and optimization nodes."""

from __future__ import annotations

from schemas.internal.layout import SlideData
from schemas.internal.segments import Segment
from segmentation.engine import build_candidates, optimize_candidates
from segmentation.ids import SegmentIdAllocator
from segmentation.optimizer import (
    DEFAULT_MERGE_DISTANCE,
    DEFAULT_SEMANTIC_MERGE_DISTANCE,
)


def segment_building_node(state: dict) -> dict:
    slides = [SlideData.model_validate(item) for item in state.get("slides") or []]
    ids = state.get("segment_ids") or SegmentIdAllocator()
    semantic_distance = state.get("semantic_merge_distance")
    candidates = build_candidates(
        slides,
        ids=ids,
        semantic_merge_distance=(
            DEFAULT_SEMANTIC_MERGE_DISTANCE
            if semantic_distance is None
            else float(semantic_distance)
        ),
    )
    return {
        "candidate_segments": [segment.model_dump() for segment in candidates],
        "segment_ids": ids,
        "status": "optimizing",
    }


def optimizing_node(state: dict) -> dict:
    candidates = [
        Segment.model_validate(item) for item in state.get("candidate_segments") or []
    ]
    ids = state.get("segment_ids") or SegmentIdAllocator()
    merge_distance = state.get("merge_distance_threshold")
    segments = optimize_candidates(
        candidates,
        ids=ids,
        merge_distance=DEFAULT_MERGE_DISTANCE if merge_distance is None else float(merge_distance),
    )
    return {
        "segments": [segment.model_dump() for segment in segments],
        "status": "ready_for_review",
    }


__all__ = ["optimizing_node", "segment_building_node"]
