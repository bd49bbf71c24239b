"""Bounding-box math shared by region assignment and merging.

All helpers are total over well-formed boxes (non-negative width/height) and
return sentinel values instead of raising.
"""

from __future__ import annotations

import math
from typing import Iterable, Tuple

from schemas.internal.layout import BoundingBox

EMPTY_BOX = BoundingBox(x=0, y=0, width=0, height=0)


def area(box: BoundingBox) -> float:
    return box.width * box.height


def centroid(box: BoundingBox) -> Tuple[float, float]:
    return box.x + box.width / 2, box.y + box.height / 2


def overlap_area(a: BoundingBox, b: BoundingBox) -> float:
    """Area of the intersection rectangle, 0 when the boxes do not intersect."""
    left = max(a.x, b.x)
    right = min(a.x + a.width, b.x + b.width)
    top = max(a.y, b.y)
    bottom = min(a.y + a.height, b.y + b.height)
    if left < right and top < bottom:
        return (right - left) * (bottom - top)
    return 0.0


def is_contained(inner: BoundingBox, outer: BoundingBox) -> bool:
    """True when every edge of ``inner`` lies on or inside ``outer``."""
    return (
        inner.x >= outer.x
        and inner.y >= outer.y
        and inner.x + inner.width <= outer.x + outer.width
        and inner.y + inner.height <= outer.y + outer.height
    )


def centroid_distance(a: BoundingBox, b: BoundingBox) -> float:
    ax, ay = centroid(a)
    bx, by = centroid(b)
    return math.hypot(ax - bx, ay - by)


def union(boxes: Iterable[BoundingBox]) -> BoundingBox:
    """Minimal box covering all boxes; the zero box for an empty input."""
    items = list(boxes)
    if not items:
        return EMPTY_BOX

    min_x = min(box.x for box in items)
    min_y = min(box.y for box in items)
    max_x = max(box.x + box.width for box in items)
    max_y = max(box.y + box.height for box in items)
    return BoundingBox(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)


__all__ = [
    "EMPTY_BOX",
    "area",
    "centroid",
    "centroid_distance",
    "is_contained",
    "overlap_area",
    "union",
]
