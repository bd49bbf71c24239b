from __future__ import annotations

import pytest

from segmentation.regions import (
    assign_region,
    group_fragments,
    region_score,
    semantic_similarity,
)


def test_contained_fragment_scores_overlap_plus_bonus(layout_factory) -> None:
    fragment = layout_factory.fragment("f1", "Overview", 110, 55, 100, 10)
    region = layout_factory.region("r1", "title_group", 100, 50, 600, 70)

    expected = 1000 / 42000 + 0.3
    assert region_score(fragment, region) == pytest.approx(expected)
    assert assign_region(fragment, [region]) == region


def test_fragment_without_overlap_or_keywords_is_unassigned(layout_factory) -> None:
    fragment = layout_factory.fragment("f1", "Footer", 0, 500, 50, 10)
    region = layout_factory.region("r1", "body_text", 100, 50, 600, 70)

    assert assign_region(fragment, [region]) is None


def test_ties_keep_first_region(layout_factory) -> None:
    fragment = layout_factory.fragment("f1", "Text", 10, 10, 10, 10)
    first = layout_factory.region("a", "body_text", 0, 0, 100, 100)
    second = layout_factory.region("b", "callout", 0, 0, 100, 100)

    assert assign_region(fragment, [first, second]).id == "a"


def test_topic_keywords_can_attract_a_distant_fragment(layout_factory) -> None:
    fragment = layout_factory.fragment("f1", "Quarterly revenue", 0, 500, 50, 10)
    plain = layout_factory.region("a", "body_text", 100, 50, 100, 100)
    topical = layout_factory.region("b", "body_text", 300, 50, 100, 100, topic="revenue")

    assert assign_region(fragment, [plain, topical]).id == "b"


def test_semantic_similarity_is_capped_and_skips_short_tokens() -> None:
    assert semantic_similarity("Quarterly revenue", "revenue", None) == pytest.approx(0.2)
    assert semantic_similarity("q3 revenue", "q3 revenue", None) == pytest.approx(0.1)
    assert semantic_similarity(None, "revenue", None) == 0
    assert semantic_similarity("revenue", None, "") == 0


def test_semantic_context_alone_does_not_score() -> None:
    assert semantic_similarity("Revenue forecast", None, "revenue forecast") == 0
    assert semantic_similarity("Revenue forecast", "", "revenue forecast") == 0
    assert semantic_similarity("Revenue forecast", "sales", "revenue forecast") == pytest.approx(
        2 / 3 * 0.2
    )


def test_group_fragments_keeps_region_order_and_reports_unassigned(layout_factory) -> None:
    regions = [
        layout_factory.region("top", "title_group", 0, 0, 800, 100),
        layout_factory.region("body", "body_text", 0, 100, 800, 400),
    ]
    fragments = [
        layout_factory.fragment("f1", "Body line", 10, 150, 200, 20),
        layout_factory.fragment("f2", "Title", 10, 10, 200, 40),
        layout_factory.fragment("f3", "Outside", 10, 550, 200, 20),
    ]

    groups, unassigned = group_fragments(fragments, regions)

    assert [group.region.id for group in groups] == ["top", "body"]
    assert [item.id for item in groups[0].fragments] == ["f2"]
    assert [item.id for item in groups[1].fragments] == ["f1"]
    assert [item.id for item in unassigned] == ["f3"]
