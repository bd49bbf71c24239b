"""Typer CLI entrypoint for segmentation and glossary runs."""

from __future__ import annotations

import os
import shlex
import sys
from importlib import import_module
from pathlib import Path
from typing import Any

import typer

from transeg import __version__

_SUBCOMMAND_SPECS: list[tuple[str, str, str]] = [
    ("export", "cli.commands.export", "Export segments and glossaries"),
    ("config", "cli.commands.config", "Inspect configuration"),
]
_SUBCOMMAND_NAMES = {name for name, _, _ in _SUBCOMMAND_SPECS}
_SUBCOMMANDS_REGISTERED = False

app = typer.Typer(
    help=(
        "Translation segmentation toolkit\n\n"
        "Segments presentations into translation units and builds glossaries "
        "of untranslatable terms.\n"
    ),
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    add_completion=True,
)


@app.callback()
def root(
    ctx: typer.Context,
    version_flag: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="Print the version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable debug logging",
    ),
) -> None:
    from cli.common import configure_logging

    if version_flag:
        typer.echo(__version__)
        raise typer.Exit()
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command(help="Segment a .pptx presentation into translation units")
def segment(
    pptx_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        metavar="PPTX",
    ),
    options: str | None = typer.Option(
        None,
        "--options",
        help="SegmentationOptions as a JSON string",
    ),
    options_file: Path | None = typer.Option(
        None,
        "--options-file",
        help="JSON/YAML file holding SegmentationOptions",
    ),
    set_values: list[str] | None = typer.Option(
        None,
        "--set",
        help="Override a single option with key=value; repeatable",
    ),
    use_llm: bool | None = typer.Option(
        None,
        "--llm/--no-llm",
        help="Run model region analysis (default: llm)",
    ),
    source_language: str = typer.Option(
        "en",
        "--source-lang",
        help="Source language tag for XLIFF output",
    ),
    target_language: str = typer.Option(
        "fr",
        "--target-lang",
        help="Target language tag for XLIFF output",
    ),
    json_out: bool = typer.Option(
        False,
        "--json",
        help="Print the full result as JSON",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        help="Write result.json, segments.json and segments.xlf here",
    ),
) -> None:
    from cli.common import build_options, fail, load_options_payload
    from schemas.requests import DocumentInput, SegmentationOptions
    from services.visual_runner import run_visual_segmentation

    payload = load_options_payload(options, options_file, set_values)
    if use_llm is not None:
        payload["region_analysis"] = "llm" if use_llm else "none"
    options_obj = build_options(payload, SegmentationOptions)

    try:
        result = run_visual_segmentation(
            DocumentInput(path=str(pptx_path)), options_obj
        )
    except Exception as exc:
        fail(exc)
        return

    if json_out:
        _emit_result(result)
    else:
        _print_segments(result)

    if output_dir is not None:
        _write_segmentation_output(
            result,
            output_dir,
            source_language=source_language,
            target_language=target_language,
            original=pptx_path.name,
        )


@app.command(help="Extract a glossary of untranslatable terms from a document")
def glossary(
    document_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        metavar="DOCUMENT",
    ),
    options: str | None = typer.Option(
        None,
        "--options",
        help="GlossaryOptions as a JSON string",
    ),
    options_file: Path | None = typer.Option(
        None,
        "--options-file",
        help="JSON/YAML file holding GlossaryOptions",
    ),
    set_values: list[str] | None = typer.Option(
        None,
        "--set",
        help="Override a single option with key=value; repeatable",
    ),
    json_out: bool = typer.Option(
        False,
        "--json",
        help="Print the full result as JSON",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        help="Write result.json and glossary.csv here",
    ),
) -> None:
    from cli.common import build_options, fail, load_options_payload
    from schemas.requests import DocumentInput, GlossaryOptions
    from services.glossary_runner import run_glossary_analysis

    payload = load_options_payload(options, options_file, set_values)
    options_obj = build_options(payload, GlossaryOptions)

    try:
        result = run_glossary_analysis(
            DocumentInput(path=str(document_path)), options_obj
        )
    except Exception as exc:
        fail(exc)
        return

    if json_out:
        _emit_result(result)
    else:
        _print_terms(result)

    if output_dir is not None:
        _write_glossary_output(result, output_dir)


def _emit_result(result: Any) -> None:
    from cli.common import emit_json

    emit_json(result.model_dump(mode="json", exclude_none=True))


def _print_segments(result: Any) -> None:
    from cli.commands.shared import preview

    for segment_item in result.segments:
        typer.echo(
            f"[{segment_item.page_id}] {segment_item.id} "
            f"({segment_item.category}): {preview(segment_item.text)}"
        )
    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    typer.echo(f"{len(result.segments)} segment(s) in {result.runtime_ms} ms")


def _print_terms(result: Any) -> None:
    for term in result.terms:
        frequency = "" if term.frequency is None else f" x{term.frequency}"
        typer.echo(f"{term.term} [{term.category}, {term.confidence}]{frequency}")
    typer.echo(f"{len(result.terms)} term(s) in {result.runtime_ms} ms")


def _write_segmentation_output(
    result: Any,
    output_dir: Path,
    *,
    source_language: str,
    target_language: str,
    original: str,
) -> None:
    from exports.segments import segments_to_json
    from exports.xliff import render_xliff

    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / "result.json").write_text(
        result.model_dump_json(indent=2, exclude_none=True), encoding="utf-8"
    )
    (output_dir / "segments.json").write_text(
        segments_to_json(result.segments), encoding="utf-8"
    )
    (output_dir / "segments.xlf").write_text(
        render_xliff(
            result.segments,
            source_language=source_language,
            target_language=target_language,
            original=original,
        ),
        encoding="utf-8",
    )
    typer.echo(f"Saved output to {output_dir}")


def _write_glossary_output(result: Any, output_dir: Path) -> None:
    from exports.glossary import glossary_to_csv

    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / "result.json").write_text(
        result.model_dump_json(indent=2, exclude_none=True), encoding="utf-8"
    )
    (output_dir / "glossary.csv").write_text(
        glossary_to_csv(result.terms), encoding="utf-8"
    )
    typer.echo(f"Saved output to {output_dir}")


def _parse_invoked_subcommand() -> str | None:
    completion_args = os.getenv("_TYPER_COMPLETE_ARGS")
    tokens: list[str]
    if completion_args:
        try:
            tokens = shlex.split(completion_args)
        except ValueError:
            tokens = completion_args.split()
        if tokens:
            tokens = tokens[1:]
    else:
        tokens = sys.argv[1:]

    for token in tokens:
        if token in _SUBCOMMAND_NAMES:
            return token
        if token.startswith("-"):
            continue
        break
    return None


def _register_subcommands(selected: str | None = None, *, eager: bool = False) -> None:
    """Attach subcommand groups, importing only the one being invoked."""
    global _SUBCOMMANDS_REGISTERED
    if _SUBCOMMANDS_REGISTERED:
        return

    if selected is None and not eager:
        selected = _parse_invoked_subcommand()
    for name, module_path, help_text in _SUBCOMMAND_SPECS:
        if eager or selected == name:
            module = import_module(module_path)
            app.add_typer(module.app, name=name)
            continue
        app.add_typer(
            typer.Typer(
                help=help_text,
                add_completion=False,
                no_args_is_help=True,
            ),
            name=name,
        )

    _SUBCOMMANDS_REGISTERED = True


def main() -> None:
    _register_subcommands()
    app()


__all__ = ["app", "main"]
