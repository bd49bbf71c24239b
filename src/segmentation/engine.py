"""Segmentation entrypoint: build every slide, then optimize once."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from schemas.internal.layout import SlideData
from schemas.internal.segments import Segment
from segmentation.builder import build_segments
from segmentation.ids import SegmentIdAllocator
from segmentation.optimizer import (
    DEFAULT_MERGE_DISTANCE,
    DEFAULT_SEMANTIC_MERGE_DISTANCE,
    optimize,
)

logger = logging.getLogger(__name__)


def build_candidates(
    slides: Iterable[SlideData],
    *,
    ids: SegmentIdAllocator,
    semantic_merge_distance: float = DEFAULT_SEMANTIC_MERGE_DISTANCE,
) -> List[Segment]:
    """Candidate segments for every slide, using ``visual_contexts`` as regions."""
    candidates: List[Segment] = []
    for slide in slides:
        built = build_segments(
            slide.slide_id,
            slide.text_elements,
            slide.visual_contexts,
            ids=ids,
            semantic_merge_distance=semantic_merge_distance,
        )
        logger.debug("Slide %s: %d candidate segment(s)", slide.slide_id, len(built))
        candidates.extend(built)
    return candidates


def optimize_candidates(
    candidates: List[Segment],
    *,
    ids: SegmentIdAllocator,
    merge_distance: float = DEFAULT_MERGE_DISTANCE,
) -> List[Segment]:
    segments = optimize(candidates, ids=ids, merge_distance=merge_distance)
    logger.info(
        "Segmentation produced %d segment(s) from %d candidate(s)",
        len(segments),
        len(candidates),
    )
    return segments


def generate_segmentation(
    slides: Iterable[SlideData],
    *,
    ids: Optional[SegmentIdAllocator] = None,
    merge_distance: float = DEFAULT_MERGE_DISTANCE,
    semantic_merge_distance: float = DEFAULT_SEMANTIC_MERGE_DISTANCE,
) -> List[Segment]:
    """Return the optimized segment list for a sequence of analysed slides.

    A fresh id allocator is created per call unless one is supplied. The
    visual graph runs the same two steps as separate nodes.
    """
    allocator = ids or SegmentIdAllocator()
    candidates = build_candidates(
        slides, ids=allocator, semantic_merge_distance=semantic_merge_distance
    )
    return optimize_candidates(candidates, ids=allocator, merge_distance=merge_distance)


__all__ = ["build_candidates", "generate_segmentation", "optimize_candidates"]
