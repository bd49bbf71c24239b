from __future__ import annotations

import pytest

from schemas.internal.layout import BoundingBox
from segmentation.geometry import (
    EMPTY_BOX,
    area,
    centroid,
    centroid_distance,
    is_contained,
    overlap_area,
    union,
)


def _box(x, y, width, height) -> BoundingBox:
    return BoundingBox(x=x, y=y, width=width, height=height)


def test_union_contains_every_member() -> None:
    boxes = [_box(10, 10, 20, 20), _box(50, 5, 10, 10), _box(15, 40, 5, 5)]
    covering = union(boxes)

    assert covering == _box(10, 5, 50, 40)
    assert all(is_contained(item, covering) for item in boxes)


def test_union_of_nothing_is_zero_box() -> None:
    assert union([]) == EMPTY_BOX
    assert area(union([])) == 0


def test_overlap_area_for_disjoint_and_touching_boxes_is_zero() -> None:
    left = _box(0, 0, 10, 10)
    assert overlap_area(left, _box(50, 50, 10, 10)) == 0
    assert overlap_area(left, _box(10, 0, 10, 10)) == 0


def test_overlap_area_of_intersecting_boxes() -> None:
    assert overlap_area(_box(0, 0, 10, 10), _box(5, 5, 10, 10)) == 25


def test_is_contained_includes_shared_edges() -> None:
    outer = _box(0, 0, 100, 50)
    assert is_contained(_box(0, 0, 100, 50), outer)
    assert not is_contained(_box(90, 0, 20, 10), outer)


def test_centroid_and_distance() -> None:
    assert centroid(_box(0, 0, 10, 20)) == (5, 10)
    assert centroid_distance(_box(0, 0, 10, 10), _box(30, 40, 10, 10)) == pytest.approx(50)


def test_negative_coordinates_are_rejected() -> None:
    with pytest.raises(ValueError):
        BoundingBox(x=-1, y=0, width=1, height=1)
