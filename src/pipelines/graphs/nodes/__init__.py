"""Graph node implementations."""

from .glossary import context_extraction_node, term_extraction_node  # noqa: F401
from .layout import extract_layout_node  # noqa: F401
from .regions import region_analysis_node  # noqa: F401
from .segments import optimizing_node, segment_building_node  # noqa: F401

__all__ = [
    "context_extraction_node",
    "extract_layout_node",
    "optimizing_node",
    "region_analysis_node",
    "segment_building_node",
    "term_extraction_node",
]
