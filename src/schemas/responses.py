"""External response schemas for analysis runs."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from schemas.internal.glossary import DocumentContext, GlossaryTerm
from schemas.internal.layout import SlideData
from schemas.internal.segments import Segment


class PowerPointAnalysis(BaseModel):
    file_name: str
    slides: List[SlideData]
    total_slides: int = Field(ge=0)
    analysis_timestamp: str

    model_config = ConfigDict(extra="forbid")


class VisualAnalysisResult(BaseModel):
    analysis: PowerPointAnalysis
    segments: List[Segment]
    runtime_ms: int | None = None
    warnings: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class GlossaryAnalysisResult(BaseModel):
    context: DocumentContext
    terms: List[GlossaryTerm]
    runtime_ms: int | None = None

    model_config = ConfigDict(extra="forbid")


__all__ = ["GlossaryAnalysisResult", "PowerPointAnalysis", "VisualAnalysisResult"]
