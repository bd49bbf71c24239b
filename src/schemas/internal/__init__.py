"""Internal schema definitions."""

from .glossary import (  # noqa: F401
    TERM_CATEGORIES,
    DocumentContext,
    GlossaryTerm,
    TermCategory,
)
from .layout import (  # noqa: F401
    REGION_TYPES,
    BoundingBox,
    LayoutRegion,
    RegionAnalysis,
    RegionType,
    SlideData,
    TextFragment,
    TextRelationship,
)
from .segments import Confidence, Segment  # noqa: F401

__all__ = [
    "REGION_TYPES",
    "TERM_CATEGORIES",
    "BoundingBox",
    "Confidence",
    "DocumentContext",
    "GlossaryTerm",
    "LayoutRegion",
    "RegionAnalysis",
    "RegionType",
    "Segment",
    "SlideData",
    "TermCategory",
    "TextFragment",
    "TextRelationship",
]
