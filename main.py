from pathlib import Path

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from schemas.requests import DocumentInput
from segmentation.review import ReviewSession
from services.visual_runner import run_visual_segmentation

app = typer.Typer()
console = Console()

_ACTIONS = ["list", "edit", "translate", "merge", "remove", "filter", "export", "quit"]


@app.command()
def review(
    file_path: str,
    no_llm: bool = typer.Option(False, "--no-llm", help="Skip model region analysis"),
):
    """Segment a presentation and review the segments interactively."""
    console.print("[bold blue]Analyzing presentation...[/bold blue]")
    result = run_visual_segmentation(
        DocumentInput(path=file_path),
        {"region_analysis": "none" if no_llm else "llm"},
    )
    for warning in result.warnings:
        console.print(f"[yellow]{warning}[/yellow]")

    session = ReviewSession(result.segments)
    _show(session.segments)

    while True:
        action = Prompt.ask("\nNext action?", choices=_ACTIONS, default="list")
        try:
            if action == "quit":
                return
            if action == "list":
                _show(session.segments)
            elif action == "edit":
                segment_id = Prompt.ask("Segment id")
                text = Prompt.ask("New text", default=session.get(segment_id).text)
                session.update_segment(segment_id, text=text)
            elif action == "translate":
                segment_id = Prompt.ask("Segment id")
                translation = Prompt.ask("Translation")
                session.update_segment(segment_id, translation=translation)
            elif action == "merge":
                raw = Prompt.ask("Segment ids (comma separated)")
                merged = session.merge_segments([item.strip() for item in raw.split(",")])
                console.print(f"[green]Created {merged.id}[/green]")
            elif action == "remove":
                segment_id = Prompt.ask("Segment id")
                if Confirm.ask(f"Remove {segment_id}?", default=False):
                    session.remove_segment(segment_id)
            elif action == "filter":
                category = Prompt.ask("Category", default="all")
                search = Prompt.ask("Search", default="")
                _show(session.filter(category=category, search=search or None))
            elif action == "export":
                target = Prompt.ask("Target language", default="fr")
                output = Path(Prompt.ask("Output file", default="segments.xlf"))
                output.write_text(
                    session.export_xliff("en", target, original=Path(file_path).name),
                    encoding="utf-8",
                )
                console.print(f"[green]Saved {len(session)} segment(s) to {output}[/green]")
                return
        except (KeyError, ValueError) as exc:
            console.print(f"[red]{exc}[/red]")


def _show(segments):
    table = Table(title="Segments")
    table.add_column("Page", justify="right")
    table.add_column("Id")
    table.add_column("Category")
    table.add_column("Text")
    table.add_column("Translation")
    for segment in segments:
        table.add_row(
            str(segment.page_id),
            segment.id,
            segment.category,
            segment.text,
            segment.translation or "",
        )
    console.print(table)


if __name__ == "__main__":
    app()
