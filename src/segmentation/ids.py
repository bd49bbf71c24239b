"""Per-run segment id allocation."""

from __future__ import annotations

from itertools import count


class SegmentIdAllocator:
    """Monotonic counter scoped to one processing run.

    Pass the same allocator through every stage of a run so ids stay unique;
    separate runs use separate allocators and never contend.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = count(start)

    def allocate(self, stem: str) -> str:
        return f"{stem}_{next(self._counter)}"


__all__ = ["SegmentIdAllocator"]
