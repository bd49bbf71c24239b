"""Segmentation optimizer: de-duplication, proximity merging, ordering.

Also hosts the semantic region merge that runs before segments are built:
regions sharing a topic that sit close together are folded into one.

Merging is a single forward pass. A segment absorbs every later unprocessed
segment similar to it, but merged output is not re-scanned, so three mutually
close segments can end up in two clusters depending on scan order.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from schemas.internal.segments import Segment
from segmentation.geometry import centroid_distance, union
from segmentation.ids import SegmentIdAllocator
from segmentation.regions import RegionGroup

DEFAULT_MERGE_DISTANCE = 50.0
DEFAULT_SEMANTIC_MERGE_DISTANCE = 200.0


def optimize(
    segments: Sequence[Segment],
    *,
    ids: SegmentIdAllocator,
    merge_distance: float = DEFAULT_MERGE_DISTANCE,
) -> List[Segment]:
    """De-duplicate, merge near neighbours, and sort into reading order."""
    unique = remove_duplicates(segments)
    merged = merge_similar_segments(unique, ids=ids, threshold=merge_distance)
    return sort_segments(merged)


def remove_duplicates(segments: Iterable[Segment]) -> List[Segment]:
    """Keep the first segment per (page, text, x, y)."""
    seen: set[Tuple[int, str, float, float]] = set()
    unique: List[Segment] = []
    for segment in segments:
        key = (segment.page_id, segment.text, segment.coordinates.x, segment.coordinates.y)
        if key in seen:
            continue
        seen.add(key)
        unique.append(segment)
    return unique


def are_segments_similar(
    first: Segment, second: Segment, *, threshold: float = DEFAULT_MERGE_DISTANCE
) -> bool:
    if first.page_id != second.page_id or first.category != second.category:
        return False
    return centroid_distance(first.coordinates, second.coordinates) < threshold


def merge_similar_segments(
    segments: Sequence[Segment],
    *,
    ids: SegmentIdAllocator,
    threshold: float = DEFAULT_MERGE_DISTANCE,
) -> List[Segment]:
    merged: List[Segment] = []
    processed: set[int] = set()

    for index, segment in enumerate(segments):
        if index in processed:
            continue
        processed.add(index)

        cluster = [segment]
        for other_index in range(index + 1, len(segments)):
            if other_index in processed:
                continue
            other = segments[other_index]
            if are_segments_similar(segment, other, threshold=threshold):
                cluster.append(other)
                processed.add(other_index)

        if len(cluster) > 1:
            merged.append(merge_segments(cluster, ids=ids))
        else:
            merged.append(segment)

    return merged


def merge_segments(segments: Sequence[Segment], *, ids: SegmentIdAllocator) -> Segment:
    """Fold segments into a copy of the first one, keeping member order."""
    if not segments:
        raise ValueError("merge_segments requires at least one segment")

    first = segments[0]
    return first.model_copy(
        update={
            "id": ids.allocate("merged"),
            "text": " ".join(segment.text for segment in segments),
            "coordinates": union(segment.coordinates for segment in segments),
            "notes": f"Merged {len(segments)} similar segments",
            "is_merged": True,
            "original_segment_ids": [segment.id for segment in segments],
        }
    )


def sort_segments(segments: Iterable[Segment]) -> List[Segment]:
    """Order by page, then top-to-bottom, then left-to-right."""
    return sorted(
        segments,
        key=lambda segment: (
            segment.page_id,
            segment.coordinates.y,
            segment.coordinates.x,
        ),
    )


def merge_semantic_regions(
    groups: Sequence[RegionGroup],
    *,
    threshold: float = DEFAULT_SEMANTIC_MERGE_DISTANCE,
) -> List[RegionGroup]:
    """Merge nearby groups whose regions share a non-empty topic.

    Returns a new list; input groups and regions are left untouched. A merged
    group takes the list position of its earliest member.
    """
    by_topic: Dict[str, List[int]] = {}
    for index, group in enumerate(groups):
        topic = group.region.topic
        if topic:
            by_topic.setdefault(topic, []).append(index)

    replacements: Dict[int, RegionGroup] = {}
    absorbed: set[int] = set()

    for topic, indices in by_topic.items():
        if len(indices) < 2:
            continue

        anchor = groups[indices[0]].region.bounding_box
        ordered = sorted(
            indices,
            key=lambda idx: centroid_distance(anchor, groups[idx].region.bounding_box),
        )
        entries: List[Tuple[int, RegionGroup]] = [(idx, groups[idx]) for idx in ordered]

        changed = True
        while changed:
            changed = False
            position = 0
            while position < len(entries) - 1:
                left_idx, left = entries[position]
                right_idx, right = entries[position + 1]
                distance = centroid_distance(
                    left.region.bounding_box, right.region.bounding_box
                )
                if distance < threshold:
                    entries[position] = (
                        min(left_idx, right_idx),
                        _merge_groups(left, right, topic),
                    )
                    del entries[position + 1]
                    changed = True
                else:
                    position += 1

        survivors = {idx for idx, _ in entries}
        absorbed.update(set(indices) - survivors)
        for idx, group in entries:
            replacements[idx] = group

    result: List[RegionGroup] = []
    for index, group in enumerate(groups):
        if index in absorbed:
            continue
        result.append(replacements.get(index, group))
    return result


def _merge_groups(left: RegionGroup, right: RegionGroup, topic: str) -> RegionGroup:
    fragments = left.fragments + right.fragments
    if fragments:
        box = union(fragment.bounding_box for fragment in fragments)
    else:
        box = union([left.region.bounding_box, right.region.bounding_box])

    related = list(dict.fromkeys([*left.region.related_elements, *right.region.related_elements]))
    region = left.region.model_copy(
        update={
            "bounding_box": box,
            "related_elements": related,
            "semantic_context": f"Combined {topic} context",
            "merged_from": [
                *left.region.merged_from,
                right.region.id,
                *right.region.merged_from,
            ],
        }
    )
    return RegionGroup(region=region, fragments=fragments)


__all__ = [
    "DEFAULT_MERGE_DISTANCE",
    "DEFAULT_SEMANTIC_MERGE_DISTANCE",
    "are_segments_similar",
    "merge_segments",
    "merge_semantic_regions",
    "merge_similar_segments",
    "optimize",
    "remove_duplicates",
    "sort_segments",
]
