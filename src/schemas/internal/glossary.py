"""Document context and glossary term contracts."""

from __future__ import annotations

import json
import re
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

TermCategory = Literal["company", "product", "technical", "acronym", "other"]

TERM_CATEGORIES: tuple[str, ...] = (
    "company",
    "product",
    "technical",
    "acronym",
    "other",
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class DocumentContext(BaseModel):
    """Free-form profile of a document, inferred once per document.

    Model replies are accepted in camelCase or snake_case; list values for
    descriptive fields are joined into one string.
    """

    origin: Optional[str] = None
    author_role: Optional[str] = None
    target_audience: Optional[str] = None
    time_context: Optional[str] = None
    domain: Optional[str] = None
    document_type: Optional[str] = None
    geographic_context: Optional[str] = None
    formality_level: Optional[str] = None
    technical_depth: Optional[str] = None
    business_stage: Optional[str] = None
    regulatory_context: Optional[str] = None
    potential_terms: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_BOUNDARY.sub("_", str(key)).lower()
            if name == "potential_terms":
                normalized[name] = _as_string_list(value)
            else:
                normalized[name] = _as_text(value)
        return normalized

    def summary_items(self) -> List[tuple[str, str]]:
        """Populated (key, value) pairs, seed terms excluded."""
        payload = self.model_dump(exclude={"potential_terms"}, exclude_none=True)
        return [(key, str(value)) for key, value in payload.items() if value != ""]


class GlossaryTerm(BaseModel):
    """A term that should stay untranslated."""

    id: str
    term: str
    category: TermCategory = "other"
    confidence: Literal["high", "medium", "low"] = "medium"
    context: Optional[str] = None
    frequency: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


def _as_text(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if item is not None)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _as_string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value if item is not None]
    else:
        items = [str(value)]
    return [item.strip() for item in items if item.strip()]


__all__ = ["TERM_CATEGORIES", "DocumentContext", "GlossaryTerm", "TermCategory"]
