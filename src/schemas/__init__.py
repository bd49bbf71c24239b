"""Schema package for external and internal contracts."""

from .requests import (
    DocumentInput,
    GlossaryExportRequest,
    GlossaryOptions,
    SegmentationOptions,
    XliffExportRequest,
)
from .responses import GlossaryAnalysisResult, PowerPointAnalysis, VisualAnalysisResult

__all__ = [
    "DocumentInput",
    "GlossaryAnalysisResult",
    "GlossaryExportRequest",
    "GlossaryOptions",
    "PowerPointAnalysis",
    "SegmentationOptions",
    "VisualAnalysisResult",
    "XliffExportRequest",
]
