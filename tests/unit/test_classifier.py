from __future__ import annotations

import pytest

from schemas.internal.layout import BoundingBox, TextFragment
from segmentation.classifier import classify


def _fragment(text: str, **style) -> TextFragment:
    return TextFragment(
        id="s1_tb1",
        text=text,
        bounding_box=BoundingBox(x=0, y=0, width=100, height=20),
        **style,
    )


@pytest.mark.parametrize(
    ("text", "style", "expected"),
    [
        ("Q3 Results", {"font_size": 24, "is_bold": True}, "title_group"),
        ("Short heading", {"is_bold": True}, "title_group"),
        ("• Revenue grew 12%", {"font_size": 14, "is_bold": False}, "bullet_list"),
        ("- first item\n- second item", {}, "bullet_list"),
        ("Figure 3: Revenue by region", {}, "caption"),
        ("See the table below", {}, "caption"),
        ("Tables and figures", {}, "caption"),
        ("Tablet sales", {}, "body_text"),
        ("Timetable for Q4", {}, "body_text"),
        ("Plain paragraph text", {}, "body_text"),
    ],
)
def test_classify(text, style, expected) -> None:
    assert classify(_fragment(text, **style)) == expected


def test_title_rule_wins_over_bullet_marker() -> None:
    assert classify(_fragment("• Agenda", font_size=28)) == "title_group"


def test_large_text_with_period_is_not_a_title() -> None:
    assert classify(_fragment("Results were strong.", font_size=24)) == "body_text"


def test_long_text_mentioning_table_is_body() -> None:
    text = "The table " + "x" * 200
    assert classify(_fragment(text)) == "body_text"


def test_missing_font_size_uses_default() -> None:
    assert classify(_fragment("Overview", font_size=None)) == "body_text"
