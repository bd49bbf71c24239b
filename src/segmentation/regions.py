"""Fragment-to-region assignment.

A fragment goes to the region with the best composite score: spatial overlap
ratio, a containment bonus, and a small lexical bonus for regions that
declare a topic, matched against the topic and semantic context. The lexical
part is capped so the spatial signal dominates.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from schemas.internal.layout import LayoutRegion, TextFragment
from segmentation.geometry import area, is_contained, overlap_area

CONTAINMENT_BONUS = 0.3
SEMANTIC_WEIGHT = 0.2
MIN_KEYWORD_LENGTH = 3

_TOKEN_SPLIT = re.compile(r"[\s\-_]+")


@dataclass(frozen=True)
class RegionGroup:
    """A region together with the fragments assigned to it, in fragment order."""

    region: LayoutRegion
    fragments: Tuple[TextFragment, ...] = field(default_factory=tuple)


def semantic_similarity(
    text: str | None,
    topic: str | None,
    semantic_context: str | None,
) -> float:
    """Share of topic/context keywords found in the text, scaled to [0, 0.2].

    Regions without a topic score 0 regardless of their semantic context.
    """
    if not text or not topic:
        return 0.0

    tokens = _tokenize(topic) + _tokenize(semantic_context)
    if not tokens:
        return 0.0

    haystack = text.lower()
    matches = sum(
        1 for token in tokens if len(token) >= MIN_KEYWORD_LENGTH and token in haystack
    )
    return (matches / len(tokens)) * SEMANTIC_WEIGHT


def region_score(fragment: TextFragment, region: LayoutRegion) -> float:
    fragment_box = fragment.bounding_box
    region_box = region.bounding_box

    largest = max(area(fragment_box), area(region_box))
    overlap_score = overlap_area(fragment_box, region_box) / largest if largest > 0 else 0.0
    contained_score = CONTAINMENT_BONUS if is_contained(fragment_box, region_box) else 0.0
    lexical_score = semantic_similarity(
        fragment.text, region.topic, region.semantic_context
    )
    return overlap_score + contained_score + lexical_score


def assign_region(
    fragment: TextFragment, regions: Sequence[LayoutRegion]
) -> Optional[LayoutRegion]:
    """Return the best-scoring region, or None when no region scores above 0.

    Ties keep the region seen first.
    """
    best: Optional[LayoutRegion] = None
    best_score = 0.0
    for region in regions:
        score = region_score(fragment, region)
        if score > best_score:
            best_score = score
            best = region
    return best


def group_fragments(
    fragments: Sequence[TextFragment],
    regions: Sequence[LayoutRegion],
) -> Tuple[List[RegionGroup], List[TextFragment]]:
    """Assign every fragment and return (groups in region order, unassigned)."""
    assigned: dict[str, List[TextFragment]] = {region.id: [] for region in regions}
    unassigned: List[TextFragment] = []

    for fragment in fragments:
        region = assign_region(fragment, regions)
        if region is None:
            unassigned.append(fragment)
            continue
        assigned[region.id].append(fragment)

    groups: List[RegionGroup] = []
    seen: set[str] = set()
    for region in regions:
        # Duplicate region ids collapse onto the first occurrence.
        if region.id in seen:
            continue
        seen.add(region.id)
        groups.append(RegionGroup(region=region, fragments=tuple(assigned[region.id])))
    return groups, unassigned


def _tokenize(value: str | None) -> List[str]:
    if not value:
        return []
    return [token for token in _TOKEN_SPLIT.split(value.lower()) if token]


__all__ = [
    "CONTAINMENT_BONUS",
    "RegionGroup",
    "assign_region",
    "group_fragments",
    "region_score",
    "semantic_similarity",
]
