"""Deterministic segmentation engine."""

from .engine import generate_segmentation
from .ids import SegmentIdAllocator
from .review import ReviewSession

__all__ = ["ReviewSession", "SegmentIdAllocator", "generate_segmentation"]
