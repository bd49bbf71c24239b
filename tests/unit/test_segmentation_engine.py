from __future__ import annotations

from segmentation import generate_segmentation


def test_intro_region_survives_deduplication(layout_factory) -> None:
    slide = layout_factory.slide(
        1,
        [
            layout_factory.fragment("s1_tb1", "Overview", 100, 50, 200, 20),
            layout_factory.fragment("s1_tb2", "Details", 300, 100, 400, 20),
        ],
        [layout_factory.region("intro", "title_group", 100, 50, 600, 70)],
    )

    segments = generate_segmentation([slide])

    assert [segment.text for segment in segments] == ["Overview Details", "Overview", "Details"]
    assert segments[0].is_combined is True
    assert all(segment.category == "title_group" for segment in segments)


def test_close_standalone_segments_are_merged(layout_factory) -> None:
    slide = layout_factory.slide(
        1,
        [
            layout_factory.fragment("s1_tb1", "Line one", 100, 300, 100, 20),
            layout_factory.fragment("s1_tb2", "Line two", 100, 320, 100, 20),
        ],
    )

    segments = generate_segmentation([slide])

    assert len(segments) == 1
    assert segments[0].text == "Line one Line two"
    assert segments[0].is_merged is True
    assert segments[0].coordinates == layout_factory.box(100, 300, 100, 40)


def test_output_is_ordered_across_slides_with_unique_ids(layout_factory) -> None:
    slides = [
        layout_factory.slide(2, [layout_factory.fragment("s2_tb1", "Second", 0, 0, 50, 10)]),
        layout_factory.slide(
            1,
            [
                layout_factory.fragment("s1_tb1", "Lower", 0, 400, 50, 10),
                layout_factory.fragment("s1_tb2", "Upper", 0, 10, 50, 10),
            ],
        ),
    ]

    segments = generate_segmentation(slides)

    assert [segment.text for segment in segments] == ["Upper", "Lower", "Second"]
    assert len({segment.id for segment in segments}) == len(segments)


def test_merge_distance_zero_disables_proximity_merging(layout_factory) -> None:
    slide = layout_factory.slide(
        1,
        [
            layout_factory.fragment("s1_tb1", "Line one", 100, 300, 100, 20),
            layout_factory.fragment("s1_tb2", "Line two", 100, 320, 100, 20),
        ],
    )

    segments = generate_segmentation([slide], merge_distance=0)

    assert len(segments) == 2
