"""Export commands for segments and glossary terms."""

from __future__ import annotations

from pathlib import Path

import typer

from cli.common import emit_json
from exports.glossary import glossary_to_csv, glossary_to_json, write_glossary_xlsx
from exports.xliff import render_xliff
from .shared import load_segments, load_terms


app = typer.Typer(
    help="Export segments and glossaries",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
)


@app.command("xliff", help="Write segments as XLIFF 1.2")
def export_xliff(
    segments_path: Path = typer.Argument(..., metavar="SEGMENTS_JSON"),
    target_language: str = typer.Option(..., "--target-lang", help="Target language tag"),
    source_language: str = typer.Option("en", "--source-lang", help="Source language tag"),
    original: str | None = typer.Option(
        None, "--original", help="Original file name recorded in the XLIFF file"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output path (default: stdout)"),
) -> None:
    segments = load_segments(segments_path)
    document = render_xliff(
        segments,
        source_language=source_language,
        target_language=target_language,
        original=original or segments_path.stem,
    )
    if output is None:
        typer.echo(document, nl=False)
        return
    output.write_text(document, encoding="utf-8")
    typer.echo(f"Wrote {len(segments)} segment(s) to {output}")


@app.command("glossary", help="Write glossary terms as CSV, JSON or XLSX")
def export_glossary(
    terms_path: Path = typer.Argument(..., metavar="TERMS_JSON"),
    format: str = typer.Option("csv", "--format", "-f", help="csv|json|xlsx"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output path (default: stdout)"),
) -> None:
    terms = load_terms(terms_path)
    fmt = format.strip().lower()
    if fmt not in {"csv", "json", "xlsx"}:
        raise typer.BadParameter("--format must be csv, json or xlsx")

    if fmt == "xlsx":
        if output is None:
            raise typer.BadParameter("--output is required for xlsx")
        count = write_glossary_xlsx(terms, output)
        typer.echo(f"Wrote {count} term(s) to {output}")
        return

    if fmt == "json" and output is None:
        emit_json([term.model_dump() for term in terms])
        return

    content = glossary_to_csv(terms) if fmt == "csv" else glossary_to_json(terms)
    if output is None:
        typer.echo(content, nl=False)
        return
    output.write_text(content, encoding="utf-8")
    typer.echo(f"Wrote {len(terms)} term(s) to {output}")
