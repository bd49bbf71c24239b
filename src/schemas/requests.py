"""External request schemas for analysis runs and exports."""

from __future__ import annotations

from pathlib import Path
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from schemas.internal.glossary import GlossaryTerm
from schemas.internal.segments import Segment


class DocumentInput(BaseModel):
    path: str | None = None
    data: bytes | None = None
    filename: str | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _validate_source(self) -> "DocumentInput":
        if bool(self.path) == bool(self.data):
            raise ValueError("Provide exactly one of path or data.")
        if self.data and not self.filename:
            raise ValueError("filename is required when passing raw data.")
        return self

    @property
    def display_name(self) -> str:
        if self.filename:
            return self.filename
        return Path(self.path or "").name


class SegmentationOptions(BaseModel):
    """Per-run overrides for the visual segmentation flow."""

    region_analysis: Literal["llm", "none"] | None = None
    visual_model: str | None = None
    visual_model_provider: str | None = None
    visual_temperature: float | None = None
    visual_timeout: float | None = None
    visual_max_tokens: int | None = Field(default=None, ge=1)
    visual_max_retries: int | None = Field(default=None, ge=0)
    visual_include_image: bool | None = None
    visual_request_interval: float | None = Field(default=None, ge=0)

    merge_distance_threshold: float | None = Field(default=None, ge=0)
    semantic_merge_distance: float | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class GlossaryOptions(BaseModel):
    """Per-run overrides for the glossary flow."""

    analysis_model: str | None = None
    analysis_model_provider: str | None = None
    analysis_temperature: float | None = None
    analysis_timeout: float | None = None
    analysis_max_tokens: int | None = Field(default=None, ge=1)
    analysis_max_retries: int | None = Field(default=None, ge=0)
    context_max_chars: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(extra="forbid")


class XliffExportRequest(BaseModel):
    segments: List[Segment]
    source_language: str = Field(default="en", min_length=1)
    target_language: str = Field(min_length=1)
    original: str = "document"

    model_config = ConfigDict(extra="forbid")


class GlossaryExportRequest(BaseModel):
    terms: List[GlossaryTerm]

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "DocumentInput",
    "GlossaryExportRequest",
    "GlossaryOptions",
    "SegmentationOptions",
    "XliffExportRequest",
]
