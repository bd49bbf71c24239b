from __future__ import annotations

import pytest
from pydantic import ValidationError

from schemas.internal.segments import Segment
from segmentation.review import ReviewSession


def _segment(segment_id, text, y, *, category="body_text", translation=None):
    return Segment(
        id=segment_id,
        page_id=1,
        fragment_id=f"frag_{segment_id}",
        region_id="individual",
        coordinates={"x": 10, "y": y, "width": 100, "height": 20},
        text=text,
        category=category,
        translation=translation,
    )


@pytest.fixture
def session() -> ReviewSession:
    return ReviewSession(
        [
            _segment("c", "Closing remarks", 300),
            _segment("a", "Welcome", 10, category="title_group", translation="Bienvenue"),
            _segment("b", "Agenda items", 100, category="bullet_list"),
        ]
    )


def test_session_starts_sorted_and_ready(session) -> None:
    assert session.state == "ready_for_review"
    assert [segment.id for segment in session.segments] == ["a", "b", "c"]
    assert len(session) == 3


def test_update_segment_changes_only_given_fields(session) -> None:
    updated = session.update_segment("b", text="Agenda", translation="Ordre du jour")

    assert updated.text == "Agenda"
    assert updated.translation == "Ordre du jour"
    assert updated.category == "bullet_list"
    assert session.get("b") == updated


def test_update_segment_rejects_structural_fields(session) -> None:
    with pytest.raises(ValueError, match="not editable"):
        session.update_segment("a", page_id=3)


def test_update_segment_validates_values(session) -> None:
    with pytest.raises(ValidationError):
        session.update_segment("a", category="headline")


def test_unknown_segment_raises_key_error(session) -> None:
    with pytest.raises(KeyError):
        session.get("missing")
    with pytest.raises(KeyError):
        session.remove_segment("missing")


def test_merge_uses_reading_order_and_joins_translations(session) -> None:
    session.update_segment("c", translation="Conclusion")

    merged = session.merge_segments(["c", "a"])

    assert merged.text == "Welcome Closing remarks"
    assert merged.translation == "Bienvenue Conclusion"
    assert merged.fragment_id == "merged_a_c"
    assert merged.region_id == "merged"
    assert merged.confidence == "high"
    assert merged.original_segment_ids == ["a", "c"]
    assert merged.notes == "Merged 2 segments"
    assert merged.coordinates.model_dump() == {"x": 10, "y": 10, "width": 100, "height": 310}
    assert [segment.id for segment in session.segments] == [merged.id, "b"]


def test_merge_requires_two_distinct_existing_segments(session) -> None:
    with pytest.raises(ValueError):
        session.merge_segments(["a", "a"])
    with pytest.raises(KeyError):
        session.merge_segments(["a", "zzz"])
    assert len(session) == 3


def test_remove_and_add_segment(session) -> None:
    removed = session.remove_segment("b")
    assert removed.id == "b"
    assert [segment.id for segment in session.segments] == ["a", "c"]

    session.add_segment(_segment("d", "Inserted", 50))
    assert [segment.id for segment in session.segments] == ["a", "d", "c"]
    with pytest.raises(ValueError, match="already present"):
        session.add_segment(_segment("d", "Again", 60))


def test_filter_by_category_and_search(session) -> None:
    assert [segment.id for segment in session.filter(category="bullet_list")] == ["b"]
    assert len(session.filter(category="all")) == 3
    assert [segment.id for segment in session.filter(search="WELCOME")] == ["a"]
    assert [segment.id for segment in session.filter(search="bienvenue")] == ["a"]
    assert session.filter(category="caption", search="welcome") == []


def test_export_closes_the_session(session) -> None:
    document = session.export_xliff("en", "fr", original="deck.pptx")

    assert session.state == "exported"
    assert 'target-language="fr"' in document
    assert '<target state="translated">Bienvenue</target>' in document
    with pytest.raises(ValueError, match="edits are closed"):
        session.update_segment("a", text="Hello")
