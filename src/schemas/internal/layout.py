"""Layout contracts: boxes, extracted text fragments, and layout regions."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

RegionType = Literal[
    "title_group",
    "body_text",
    "caption",
    "bullet_list",
    "header_footer",
    "callout",
    "navigation",
    "other",
]

REGION_TYPES: tuple[str, ...] = (
    "title_group",
    "body_text",
    "caption",
    "bullet_list",
    "header_footer",
    "callout",
    "navigation",
    "other",
)


class BoundingBox(BaseModel):
    """Axis-aligned box in the page coordinate space (top-left origin)."""

    x: float = Field(default=0.0, ge=0)
    y: float = Field(default=0.0, ge=0)
    width: float = Field(default=0.0, ge=0)
    height: float = Field(default=0.0, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class TextFragment(BaseModel):
    """Atomic piece of extracted text with its location and style hints."""

    id: str
    text: str
    bounding_box: BoundingBox
    font_size: Optional[float] = None
    font_family: Optional[str] = None
    color: Optional[str] = None
    is_bold: Optional[bool] = None
    is_italic: Optional[bool] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class LayoutRegion(BaseModel):
    """Named, typed spatial area that groups related fragments."""

    id: str
    type: RegionType = "other"
    description: Optional[str] = None
    bounding_box: BoundingBox
    related_elements: List[str] = Field(default_factory=list)
    topic: Optional[str] = None
    semantic_context: Optional[str] = None
    merged_from: List[str] = Field(
        default_factory=list,
        description="Ids of regions folded into this one by semantic merging.",
    )

    model_config = ConfigDict(extra="forbid", frozen=True)


class TextRelationship(BaseModel):
    """Fragments that belong together, as found by fallback grouping."""

    group: str
    elements: List[str] = Field(default_factory=list)
    reason: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class RegionAnalysis(BaseModel):
    """Outcome of region analysis for one slide.

    ``fallback`` means the regions were synthesized from the classifier
    because the external analysis was unavailable or unusable.
    """

    status: Literal["ok", "fallback"]
    regions: List[LayoutRegion] = Field(default_factory=list)
    relationships: List[TextRelationship] = Field(default_factory=list)
    reason: Optional[str] = None
    model: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class SlideData(BaseModel):
    """Per-slide payload produced by layout extraction."""

    slide_id: int = Field(ge=1)
    slide_image: str = ""
    text_elements: List[TextFragment] = Field(default_factory=list)
    visual_contexts: List[LayoutRegion] = Field(default_factory=list)
    overall_context: str = ""
    region_analysis: Optional[RegionAnalysis] = None

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "REGION_TYPES",
    "BoundingBox",
    "LayoutRegion",
    "RegionAnalysis",
    "RegionType",
    "SlideData",
    "TextFragment",
    "TextRelationship",
]
