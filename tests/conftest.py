# tests/conftest.py
from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Callable, List

import pytest

from core.config import get_settings
from schemas.internal.layout import BoundingBox, LayoutRegion, SlideData, TextFragment

_MODEL_ENV = (
    "ANALYSIS_MODEL",
    "ANALYSIS_MODEL_PROVIDER",
    "VISUAL_MODEL",
    "VISUAL_MODEL_PROVIDER",
    "LANGSMITH_TRACING",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    # Keep local .env / shell model settings out of the tests.
    for name in _MODEL_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class DummyLLM:
    """Chat model stand-in: structured output always fails, raw replies are scripted."""

    def __init__(self, replies: List[Any] | Callable[[Any], Any]):
        self._replies = replies
        self.calls: List[Any] = []

    def with_structured_output(self, schema):
        raise NotImplementedError("structured output not supported")

    def invoke(self, messages):
        self.calls.append(messages)
        if callable(self._replies):
            reply = self._replies(messages)
        else:
            reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(content=reply)


@pytest.fixture
def dummy_llm():
    return DummyLLM


def box(x: float, y: float, width: float, height: float) -> BoundingBox:
    return BoundingBox(x=x, y=y, width=width, height=height)


def fragment(fragment_id: str, text: str, x, y, width, height, **style) -> TextFragment:
    return TextFragment(
        id=fragment_id, text=text, bounding_box=box(x, y, width, height), **style
    )


def region(region_id: str, region_type: str, x, y, width, height, **extra) -> LayoutRegion:
    return LayoutRegion(
        id=region_id, type=region_type, bounding_box=box(x, y, width, height), **extra
    )


def slide(slide_id: int, fragments, regions=()) -> SlideData:
    return SlideData(
        slide_id=slide_id,
        text_elements=list(fragments),
        visual_contexts=list(regions),
        overall_context=f"Slide {slide_id} of deck.pptx",
    )


@pytest.fixture
def layout_factory():
    return SimpleNamespace(box=box, fragment=fragment, region=region, slide=slide)
