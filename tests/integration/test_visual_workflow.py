from __future__ import annotations

import json

import pytest
from pptx import Presentation
from pptx.util import Emu, Pt

from core.exceptions import InputValidationError, SegmentationPipelineError
from pipelines.graphs.visual_graph import build_visual_graph
from segmentation import generate_segmentation
from services.visual_runner import run_visual_segmentation

FULL_SLIDE_REGION = json.dumps(
    {
        "visual_contexts": [
            {
                "id": "vc1",
                "type": "body_text",
                "bounding_box": {"x": 0, "y": 0, "width": 800, "height": 600},
            }
        ]
    }
)


@pytest.fixture
def deck_path(tmp_path):
    presentation = Presentation()
    blank = presentation.slide_layouts[6]

    slide = presentation.slides.add_slide(blank)
    title = slide.shapes.add_textbox(Emu(914400), Emu(457200), Emu(4572000), Emu(914400))
    run = title.text_frame.paragraphs[0].add_run()
    run.text = "Q3 Results"
    run.font.size = Pt(32)
    run.font.bold = True
    body = slide.shapes.add_textbox(Emu(914400), Emu(2286000), Emu(4572000), Emu(914400))
    body.text_frame.text = "Revenue grew 12%"

    second = presentation.slides.add_slide(blank)
    table = second.shapes.add_table(1, 2, Emu(0), Emu(0), Emu(4572000), Emu(914400)).table
    table.cell(0, 0).text = "SLA"
    table.cell(0, 1).text = "99.9%"

    path = tmp_path / "deck.pptx"
    presentation.save(str(path))
    return path


def test_classifier_only_run(deck_path) -> None:
    result = run_visual_segmentation(
        {"path": str(deck_path)}, {"region_analysis": "none"}
    )

    assert result.analysis.file_name == "deck.pptx"
    assert result.analysis.total_slides == 2
    assert all(
        slide.region_analysis.status == "fallback" for slide in result.analysis.slides
    )
    assert [segment.text for segment in result.segments] == [
        "Q3 Results",
        "Revenue grew 12%",
        "SLA\t99.9%",
    ]
    assert [segment.page_id for segment in result.segments] == [1, 1, 2]
    assert result.segments[0].category == "title_group"
    assert result.warnings == []


def test_missing_visual_model_degrades_with_warning(deck_path) -> None:
    result = run_visual_segmentation({"path": str(deck_path)})

    assert len(result.segments) == 3
    assert any("Missing visual model" in warning for warning in result.warnings)


def test_model_regions_group_fragments(deck_path, dummy_llm) -> None:
    llm = dummy_llm(lambda messages: FULL_SLIDE_REGION)

    result = run_visual_segmentation(
        {"data": deck_path.read_bytes(), "filename": "upload.pptx"},
        state_overrides={"visual_llm": llm, "visual_request_interval": 0.0},
    )

    assert len(llm.calls) == 2
    assert all(slide.region_analysis.status == "ok" for slide in result.analysis.slides)
    first = result.segments[0]
    assert first.is_combined is True
    assert first.text == "Q3 Results Revenue grew 12%"
    assert first.element_count == 2
    assert len(result.segments) == 4
    assert result.analysis.file_name == "upload.pptx"


def test_failed_slide_analysis_falls_back_per_slide(deck_path, dummy_llm) -> None:
    llm = dummy_llm([FULL_SLIDE_REGION, "gibberish"])

    result = run_visual_segmentation(
        {"path": str(deck_path)},
        state_overrides={"visual_llm": llm, "visual_request_interval": 0.0},
    )

    statuses = [slide.region_analysis.status for slide in result.analysis.slides]
    assert statuses == ["ok", "fallback"]
    assert any("slide(s): 2" in warning for warning in result.warnings)


def test_runner_rejects_wrong_extension(tmp_path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")

    with pytest.raises(InputValidationError, match="Invalid file type"):
        run_visual_segmentation({"path": str(path)})


def test_graph_wraps_stage_errors() -> None:
    def broken_layout(state):
        raise RuntimeError("cannot open deck")

    app = build_visual_graph(node_overrides={"extract_layout": broken_layout})

    with pytest.raises(SegmentationPipelineError) as excinfo:
        app.invoke({"file_path": "deck.pptx", "warnings": []})

    assert excinfo.value.stage == "extracting_layout"


def test_graph_with_prepared_slides(layout_factory) -> None:
    slide = layout_factory.slide(
        1,
        [
            layout_factory.fragment("s1_tb1", "Overview", 100, 50, 200, 20),
            layout_factory.fragment("s1_tb2", "Details", 300, 100, 400, 20),
        ],
        [layout_factory.region("intro", "title_group", 100, 50, 600, 70)],
    )

    def prepared_layout(state):
        return {"slides": [slide.model_dump()], "status": "region_analysis"}

    def keep_regions(state):
        return {"status": "segment_building"}

    app = build_visual_graph(
        node_overrides={"extract_layout": prepared_layout, "analyze_regions": keep_regions}
    )
    final = app.invoke({"file_path": "unused.pptx", "warnings": []})

    assert final["status"] == "ready_for_review"
    assert [segment["text"] for segment in final["segments"]] == [
        "Overview Details",
        "Overview",
        "Details",
    ]
    assert final["segments"] == [
        segment.model_dump() for segment in generate_segmentation([slide])
    ]
