"""Turn (fragment, region) assignments into candidate segments.

Three granularities are emitted on purpose: a combined segment per region, an
individual segment per grouped fragment, and a standalone classifier-based
segment per fragment. The optimizer resolves the redundancy.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from schemas.internal.layout import LayoutRegion, TextFragment
from schemas.internal.segments import Segment
from segmentation.classifier import classify
from segmentation.geometry import union
from segmentation.ids import SegmentIdAllocator
from segmentation.optimizer import DEFAULT_SEMANTIC_MERGE_DISTANCE, merge_semantic_regions
from segmentation.regions import RegionGroup, group_fragments

STANDALONE_REGION_ID = "individual"

logger = logging.getLogger(__name__)


def build_segments(
    page_id: int,
    fragments: Sequence[TextFragment],
    regions: Sequence[LayoutRegion],
    *,
    ids: SegmentIdAllocator,
    semantic_merge_distance: float = DEFAULT_SEMANTIC_MERGE_DISTANCE,
) -> List[Segment]:
    """Build combined, individual, and standalone segments for one page."""
    groups, unassigned = group_fragments(fragments, regions)
    groups = merge_semantic_regions(groups, threshold=semantic_merge_distance)
    order = {fragment.id: index for index, fragment in enumerate(fragments)}
    groups = [_in_page_order(group, order) for group in groups]
    if unassigned:
        logger.debug(
            "Page %s: %d fragment(s) matched no region", page_id, len(unassigned)
        )

    segments: List[Segment] = []
    for group in groups:
        if not group.fragments:
            continue
        segments.append(_combined_segment(page_id, group, ids))
        segments.extend(_individual_segments(page_id, group, ids))

    for index, fragment in enumerate(fragments):
        segments.append(_standalone_segment(page_id, fragment, index, ids))

    return segments


def _in_page_order(group: RegionGroup, order: dict[str, int]) -> RegionGroup:
    fragments = tuple(
        sorted(group.fragments, key=lambda fragment: order.get(fragment.id, len(order)))
    )
    if fragments == group.fragments:
        return group
    return RegionGroup(region=group.region, fragments=fragments)


def _combined_segment(
    page_id: int, group: RegionGroup, ids: SegmentIdAllocator
) -> Segment:
    region = group.region
    count = len(group.fragments)
    return Segment(
        id=ids.allocate(f"s{page_id}_vc{region.id}_combined"),
        page_id=page_id,
        fragment_id=f"vc{region.id}_combined",
        region_id=region.id,
        coordinates=union(fragment.bounding_box for fragment in group.fragments),
        text=" ".join(fragment.text for fragment in group.fragments),
        category=region.type,
        confidence="high",
        notes=f"Combined {region.type} context with {count} elements",
        is_combined=True,
        element_count=count,
    )


def _individual_segments(
    page_id: int, group: RegionGroup, ids: SegmentIdAllocator
) -> List[Segment]:
    region = group.region
    return [
        Segment(
            id=ids.allocate(f"s{page_id}_vc{region.id}_elem{index}"),
            page_id=page_id,
            fragment_id=fragment.id,
            region_id=region.id,
            coordinates=fragment.bounding_box,
            text=fragment.text,
            category=region.type,
            confidence="medium",
            notes=f"Individual element within {region.type} context",
            is_combined=False,
            parent_region_id=region.id,
        )
        for index, fragment in enumerate(group.fragments)
    ]


def _standalone_segment(
    page_id: int, fragment: TextFragment, index: int, ids: SegmentIdAllocator
) -> Segment:
    return Segment(
        id=ids.allocate(f"s{page_id}_elem{index}"),
        page_id=page_id,
        fragment_id=fragment.id,
        region_id=STANDALONE_REGION_ID,
        coordinates=fragment.bounding_box,
        text=fragment.text,
        category=classify(fragment),
        confidence="medium",
        notes="Individual text element",
        is_combined=False,
    )


__all__ = ["STANDALONE_REGION_ID", "build_segments"]
