from __future__ import annotations

import json

import pytest
from openpyxl import load_workbook
from typer.testing import CliRunner

from cli.app import _register_subcommands, app

runner = CliRunner()

SEGMENTS = [
    {
        "id": "s1_elem0_1",
        "page_id": 1,
        "fragment_id": "s1_tb1",
        "region_id": "individual",
        "coordinates": {"x": 0, "y": 0, "width": 10, "height": 10},
        "text": "Welcome",
        "category": "title_group",
    }
]
TERMS = [{"id": "term-1-0", "term": "Acme", "category": "company", "confidence": "high"}]


@pytest.fixture(autouse=True, scope="module")
def _subcommands():
    _register_subcommands(eager=True)


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip()


def test_export_xliff_to_stdout(tmp_path) -> None:
    source = tmp_path / "segments.json"
    source.write_text(json.dumps({"segments": SEGMENTS}), encoding="utf-8")

    result = runner.invoke(app, ["export", "xliff", str(source), "--target-lang", "es"])

    assert result.exit_code == 0, result.output
    assert 'target-language="es"' in result.output
    assert 'original="segments"' in result.output
    assert "<source>Welcome</source>" in result.output


def test_export_glossary_formats(tmp_path) -> None:
    source = tmp_path / "terms.json"
    source.write_text(json.dumps(TERMS), encoding="utf-8")

    result = runner.invoke(app, ["export", "glossary", str(source)])
    assert result.exit_code == 0, result.output
    assert "Acme,company,high,," in result.output

    missing_output = runner.invoke(app, ["export", "glossary", str(source), "--format", "xlsx"])
    assert missing_output.exit_code != 0

    target = tmp_path / "glossary.xlsx"
    result = runner.invoke(
        app, ["export", "glossary", str(source), "--format", "xlsx", "--output", str(target)]
    )
    assert result.exit_code == 0, result.output
    assert load_workbook(target).active["A2"].value == "Acme"


def test_export_rejects_malformed_input(tmp_path) -> None:
    source = tmp_path / "terms.json"
    source.write_text('{"items": []}', encoding="utf-8")

    result = runner.invoke(app, ["export", "glossary", str(source)])
    assert result.exit_code != 0


def test_config_show_masks_secrets(monkeypatch) -> None:
    monkeypatch.setenv("LANGSMITH_API_KEY", "secret-key")

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert "langsmith_api_key" not in payload
    assert payload["canvas_width"] == 800


def test_config_options_schema() -> None:
    result = runner.invoke(app, ["config", "options", "--flow", "glossary"])

    assert result.exit_code == 0, result.output
    assert "context_max_chars" in json.loads(result.output)["properties"]


def test_glossary_without_model_fails_cleanly(tmp_path) -> None:
    document = tmp_path / "notes.txt"
    document.write_text("Acme builds rockets.", encoding="utf-8")

    result = runner.invoke(app, ["glossary", str(document)])

    assert result.exit_code == 1
    assert "No chat model configured" in result.output


def test_segment_writes_output_dir(tmp_path) -> None:
    from pptx import Presentation
    from pptx.util import Emu

    presentation = Presentation()
    slide = presentation.slides.add_slide(presentation.slide_layouts[6])
    box = slide.shapes.add_textbox(Emu(914400), Emu(914400), Emu(3000000), Emu(500000))
    box.text_frame.text = "Hello world"
    deck = tmp_path / "deck.pptx"
    presentation.save(str(deck))
    output_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        [
            "segment",
            str(deck),
            "--no-llm",
            "--target-lang",
            "de",
            "--output-dir",
            str(output_dir),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Hello world" in result.output
    segments = json.loads((output_dir / "segments.json").read_text(encoding="utf-8"))
    assert [item["text"] for item in segments] == ["Hello world"]
    assert 'target-language="de"' in (output_dir / "segments.xlf").read_text(encoding="utf-8")
    assert (output_dir / "result.json").exists()


def test_segment_rejects_bad_options(tmp_path) -> None:
    deck = tmp_path / "deck.pptx"
    deck.write_bytes(b"placeholder")

    result = runner.invoke(app, ["segment", str(deck), "--set", "nonsense=1"])

    assert result.exit_code != 0
