"""Human review of a finished segmentation.

A session starts in ``ready_for_review``; edits keep it there. Exporting moves
it to ``exported`` and freezes it.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Literal, Optional, Sequence

from exports.xliff import render_xliff
from schemas.internal.segments import Segment
from segmentation.ids import SegmentIdAllocator
from segmentation.optimizer import merge_segments as fold_segments
from segmentation.optimizer import sort_segments

ReviewState = Literal["ready_for_review", "exported"]

EDITABLE_FIELDS = frozenset({"text", "translation", "confidence", "category", "notes"})
MERGED_REGION_ID = "merged"


class ReviewSession:
    def __init__(
        self,
        segments: Iterable[Segment],
        *,
        ids: Optional[SegmentIdAllocator] = None,
    ) -> None:
        self._segments: List[Segment] = sort_segments(segments)
        self._ids = ids or SegmentIdAllocator()
        self.state: ReviewState = "ready_for_review"

    @property
    def segments(self) -> List[Segment]:
        return list(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def get(self, segment_id: str) -> Segment:
        for segment in self._segments:
            if segment.id == segment_id:
                return segment
        raise KeyError(segment_id)

    def update_segment(self, segment_id: str, **fields: Any) -> Segment:
        """Apply edits to one segment. Values are validated against the model."""
        self._ensure_editable()
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")

        current = self.get(segment_id)
        updated = Segment.model_validate({**current.model_dump(), **fields})
        self._replace([current.id], [updated])
        return updated

    def remove_segment(self, segment_id: str) -> Segment:
        self._ensure_editable()
        removed = self.get(segment_id)
        self._replace([segment_id], [])
        return removed

    def merge_segments(self, segment_ids: Sequence[str]) -> Segment:
        """Merge two or more segments into one high-confidence segment.

        Members are taken in their current reading order, not argument order.
        """
        self._ensure_editable()
        wanted = list(dict.fromkeys(segment_ids))
        if len(wanted) < 2:
            raise ValueError("At least two distinct segments are required to merge")

        members = [segment for segment in self._segments if segment.id in wanted]
        missing = set(wanted) - {segment.id for segment in members}
        if missing:
            raise KeyError(", ".join(sorted(missing)))

        translations = [segment.translation for segment in members if segment.translation]
        folded = fold_segments(members, ids=self._ids)
        merged = folded.model_copy(
            update={
                "fragment_id": "merged_" + "_".join(segment.id for segment in members),
                "region_id": MERGED_REGION_ID,
                "confidence": "high",
                "notes": f"Merged {len(members)} segments",
                "is_combined": False,
                "element_count": None,
                "parent_region_id": None,
                "translation": " ".join(translations) if translations else None,
            }
        )
        self._replace(wanted, [merged])
        return merged

    def add_segment(self, segment: Segment) -> Segment:
        self._ensure_editable()
        if any(existing.id == segment.id for existing in self._segments):
            raise ValueError(f"Segment id already present: {segment.id}")
        self._replace([], [segment])
        return segment

    def filter(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Segment]:
        """Segments matching a category and a case-insensitive text search.

        The search looks at both source text and translation.
        """
        needle = search.lower() if search else None
        matches: List[Segment] = []
        for segment in self._segments:
            if category and category != "all" and segment.category != category:
                continue
            if needle is not None:
                in_text = needle in segment.text.lower()
                in_translation = bool(segment.translation) and needle in segment.translation.lower()
                if not (in_text or in_translation):
                    continue
            matches.append(segment)
        return matches

    def export_xliff(
        self,
        source_language: str,
        target_language: str,
        *,
        original: str = "document",
    ) -> str:
        document = render_xliff(
            self._segments,
            source_language=source_language,
            target_language=target_language,
            original=original,
        )
        self.state = "exported"
        return document

    def _ensure_editable(self) -> None:
        if self.state != "ready_for_review":
            raise ValueError(f"Review session is {self.state}; edits are closed")

    def _replace(self, remove_ids: Sequence[str], additions: Sequence[Segment]) -> None:
        drop = set(remove_ids)
        kept = [segment for segment in self._segments if segment.id not in drop]
        self._segments = sort_segments([*kept, *additions])


__all__ = ["EDITABLE_FIELDS", "ReviewSession", "ReviewState"]
