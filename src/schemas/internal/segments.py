"""Segment contracts emitted by the segmentation engine."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .layout import BoundingBox, RegionType

Confidence = Literal["high", "medium", "low"]


class Segment(BaseModel):
    """Externally visible translation unit."""

    id: str
    page_id: int
    fragment_id: str
    region_id: str
    coordinates: BoundingBox
    text: str
    category: RegionType
    confidence: Confidence = "medium"
    notes: Optional[str] = None
    is_combined: bool = False
    is_merged: bool = False
    element_count: Optional[int] = Field(default=None, ge=1)
    parent_region_id: Optional[str] = None
    original_segment_ids: List[str] = Field(default_factory=list)
    translation: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


__all__ = ["Confidence", "Segment"]
