"""Slide region analysis with a deterministic classifier fallback.

The result is always a ``RegionAnalysis``: ``ok`` when the model returned
usable regions, ``fallback`` when regions were synthesized from the
classifier, one per fragment or one per group of similar fragments.
A failing slide never fails the document.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from analysis.llm import ChatModelLike, build_messages, invoke_json_model
from schemas.internal.layout import (
    REGION_TYPES,
    BoundingBox,
    LayoutRegion,
    RegionAnalysis,
    SlideData,
    TextFragment,
    TextRelationship,
)
from segmentation.classifier import DEFAULT_FONT_SIZE, classify
from segmentation.geometry import centroid_distance, union
from transeg.telemetry import traceable_if_enabled

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

SIMILAR_FONT_SIZE_DELTA = 4.0
SIMILAR_DISTANCE = 100.0

VISUAL_SYSTEM_PROMPT = (
    "You are an expert in document layout analysis and translation segmentation. "
    "You analyze presentation slides and identify visual relationships between "
    "text elements to improve translation segmentation."
)

_REGION_TYPE_GUIDE = """\
   - title_group: multiple text boxes that form one title
   - body_text: main content paragraphs
   - caption: image/table captions
   - bullet_list: bullet point groups
   - header_footer: slide headers/footers
   - callout: highlighted text boxes
   - navigation: menu/navigation elements
   - other: other visual contexts"""

_RESPONSE_FORMAT = """\
{
  "visual_contexts": [
    {
      "id": "vc1",
      "type": "title_group",
      "description": "Main title spanning two text boxes",
      "bounding_box": {"x": 100, "y": 50, "width": 600, "height": 80},
      "related_elements": ["s1_tb1", "s1_tb2"],
      "topic": "quarterly results",
      "semantic_context": "slide title"
    }
  ]
}"""


class SlideThrottle(Protocol):
    def wait(self) -> float: ...


class _RegionPayload(BaseModel):
    id: Optional[str] = None
    type: str = "other"
    description: Optional[str] = None
    bounding_box: dict[str, Any] = Field(default_factory=dict)
    related_elements: List[str] = Field(default_factory=list)
    topic: Optional[str] = None
    semantic_context: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _snake_case_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        payload = {
            _CAMEL_BOUNDARY.sub("_", str(key)).lower(): value
            for key, value in data.items()
            if value is not None
        }
        if payload.get("id") is not None:
            payload["id"] = str(payload["id"])
        if payload.get("related_elements") is not None:
            payload["related_elements"] = [str(item) for item in payload["related_elements"]]
        return payload


class _VisualResponse(BaseModel):
    visual_contexts: List[_RegionPayload] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _accept_camel_case(cls, data: Any) -> Any:
        if isinstance(data, dict) and "visualContexts" in data and "visual_contexts" not in data:
            return {**data, "visual_contexts": data["visualContexts"]}
        return data


def build_slide_prompt(slide: SlideData) -> str:
    lines = []
    for index, fragment in enumerate(slide.text_elements, start=1):
        box = fragment.bounding_box
        font = f"{fragment.font_size:g}pt" if fragment.font_size else "default size"
        lines.append(
            f'{index}. [{fragment.id}] Text: "{fragment.text}" | '
            f"Position: ({box.x:g}, {box.y:g}) | Size: {box.width:g}x{box.height:g} | "
            f"Font: {font} {fragment.font_family or 'default'}"
        )
    elements = "\n".join(lines) or "(no text elements)"
    return (
        "Analyze this slide and identify visual relationships between text "
        "elements for optimal translation segmentation.\n\n"
        f"CONTEXT: {slide.overall_context}\n\n"
        f"TEXT ELEMENTS:\n{elements}\n\n"
        "Identify distinct visual areas and their purposes, using these types:\n"
        f"{_REGION_TYPE_GUIDE}\n\n"
        "Give regions that belong to the same subject the same topic.\n"
        "Return ONLY JSON in this format:\n"
        f"{_RESPONSE_FORMAT}"
    )


def build_slide_content(slide: SlideData, *, include_image: bool = True) -> List[dict]:
    content: List[dict] = [{"type": "text", "text": build_slide_prompt(slide)}]
    if include_image and slide.slide_image:
        content.append(
            {
                "type": "image_url",
                "image_url": {"url": slide.slide_image, "detail": "high"},
            }
        )
    return content


def are_fragments_similar(first: TextFragment, second: TextFragment) -> bool:
    """Close in font size, same boldness, and centroids under 100px apart."""
    first_size = first.font_size if first.font_size is not None else DEFAULT_FONT_SIZE
    second_size = second.font_size if second.font_size is not None else DEFAULT_FONT_SIZE
    if abs(first_size - second_size) > SIMILAR_FONT_SIZE_DELTA:
        return False
    if bool(first.is_bold) != bool(second.is_bold):
        return False
    return centroid_distance(first.bounding_box, second.bounding_box) < SIMILAR_DISTANCE


def group_similar_fragments(fragments: Sequence[TextFragment]) -> List[List[TextFragment]]:
    """Greedy grouping: each unclaimed fragment claims every later similar one."""
    groups: List[List[TextFragment]] = []
    claimed: set[int] = set()
    for index, fragment in enumerate(fragments):
        if index in claimed:
            continue
        claimed.add(index)
        group = [fragment]
        for other_index in range(index + 1, len(fragments)):
            if other_index in claimed:
                continue
            if are_fragments_similar(fragment, fragments[other_index]):
                group.append(fragments[other_index])
                claimed.add(other_index)
        groups.append(group)
    return groups


def fallback_regions(
    fragments: Sequence[TextFragment],
    groups: Sequence[Sequence[TextFragment]] | None = None,
) -> List[LayoutRegion]:
    """Classifier-typed regions for a slide without usable model output.

    A fragment on its own gets ``vc_{n}`` (its 1-based position). Similar
    fragments share one ``group_{n}`` region covering all members instead,
    so the builder emits a single combined segment for them.
    """
    if groups is None:
        groups = group_similar_fragments(fragments)
    position = {fragment.id: index for index, fragment in enumerate(fragments, start=1)}

    regions: List[LayoutRegion] = []
    for group_index, group in enumerate(groups, start=1):
        first = group[0]
        region_type = classify(first)
        if len(group) == 1:
            regions.append(
                LayoutRegion(
                    id=f"vc_{position[first.id]}",
                    type=region_type,
                    description=f"Auto-detected {region_type} context",
                    bounding_box=first.bounding_box,
                    related_elements=[first.id],
                )
            )
            continue
        regions.append(
            LayoutRegion(
                id=f"group_{group_index}",
                type=region_type,
                description=f"Grouped {len(group)} similar {region_type} elements",
                bounding_box=union(fragment.bounding_box for fragment in group),
                related_elements=[fragment.id for fragment in group],
            )
        )
    return regions


def fallback_analysis(slide: SlideData, reason: str) -> RegionAnalysis:
    groups = group_similar_fragments(slide.text_elements)
    relationships = [
        TextRelationship(
            group=f"group_{index}",
            elements=[fragment.id for fragment in group],
            reason="Elements with similar characteristics grouped together",
        )
        for index, group in enumerate(groups, start=1)
        if len(group) > 1
    ]
    return RegionAnalysis(
        status="fallback",
        regions=fallback_regions(slide.text_elements, groups),
        relationships=relationships,
        reason=reason,
    )


def regions_from_response(response: _VisualResponse) -> List[LayoutRegion]:
    regions: List[LayoutRegion] = []
    for index, payload in enumerate(response.visual_contexts, start=1):
        region_type = payload.type.strip().lower()
        regions.append(
            LayoutRegion(
                id=payload.id or f"vc{index}",
                type=region_type if region_type in REGION_TYPES else "other",
                description=payload.description,
                bounding_box=_coerce_box(payload.bounding_box),
                related_elements=payload.related_elements,
                topic=(payload.topic or "").strip() or None,
                semantic_context=payload.semantic_context,
            )
        )
    return regions


def _coerce_box(raw: dict[str, Any]) -> BoundingBox:
    values = {}
    for key in ("x", "y", "width", "height"):
        try:
            values[key] = max(float(raw.get(key) or 0), 0.0)
        except (TypeError, ValueError):
            values[key] = 0.0
    return BoundingBox(**values)


@traceable_if_enabled(name="Slide Region Analysis", run_type="llm")
def analyze_slide(
    slide: SlideData,
    *,
    llm: ChatModelLike | None,
    include_image: bool = True,
    model_name: str | None = None,
) -> RegionAnalysis:
    if llm is None:
        return fallback_analysis(slide, "No visual model configured")
    if not slide.text_elements:
        return fallback_analysis(slide, "Slide has no text elements")

    messages = build_messages(
        VISUAL_SYSTEM_PROMPT, build_slide_content(slide, include_image=include_image)
    )
    try:
        response = invoke_json_model(
            llm, messages, _VisualResponse, label=f"Slide {slide.slide_id} analysis"
        )
    except Exception as exc:
        logger.warning(
            "Region analysis failed for slide %s, using fallback: %s", slide.slide_id, exc
        )
        return fallback_analysis(slide, str(exc) or type(exc).__name__)

    return RegionAnalysis(
        status="ok", regions=regions_from_response(response), model=model_name
    )


def apply_region_analysis(slide: SlideData, analysis: RegionAnalysis) -> SlideData:
    return slide.model_copy(
        update={"visual_contexts": list(analysis.regions), "region_analysis": analysis}
    )


def analyze_slides(
    slides: Iterable[SlideData],
    *,
    llm: ChatModelLike | None,
    throttle: SlideThrottle | None = None,
    include_image: bool = True,
    model_name: str | None = None,
) -> List[SlideData]:
    """Analyse slides one at a time, pausing between model calls."""
    analysed: List[SlideData] = []
    for slide in slides:
        if llm is not None and throttle is not None:
            throttle.wait()
        analysis = analyze_slide(
            slide, llm=llm, include_image=include_image, model_name=model_name
        )
        analysed.append(apply_region_analysis(slide, analysis))
    return analysed


__all__ = [
    "SIMILAR_DISTANCE",
    "SIMILAR_FONT_SIZE_DELTA",
    "VISUAL_SYSTEM_PROMPT",
    "analyze_slide",
    "analyze_slides",
    "apply_region_analysis",
    "are_fragments_similar",
    "build_slide_content",
    "build_slide_prompt",
    "fallback_analysis",
    "fallback_regions",
    "group_similar_fragments",
    "regions_from_response",
]
