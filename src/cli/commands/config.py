"""Configuration inspection commands."""

from __future__ import annotations

from typing import Any

import typer

from cli.common import emit_json
from core.config import Settings, get_settings
from schemas.requests import GlossaryOptions, SegmentationOptions


app = typer.Typer(
    help="Inspect configuration",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
)

_SECRET_FIELDS = {"langsmith_api_key"}


@app.command("show", help="Show the effective configuration")
def show_config(
    json_out: bool = typer.Option(True, "--json/--no-json", help="Output JSON"),
) -> None:
    payload = _public_settings(get_settings())
    if json_out:
        emit_json(payload)
        return
    for key, value in payload.items():
        typer.echo(f"{key}={value}")


@app.command("diff", help="Show settings that differ from the defaults")
def diff_config() -> None:
    current = _public_settings(get_settings())
    defaults = _settings_defaults()
    diff: dict[str, dict[str, Any]] = {}
    for key, value in current.items():
        default = defaults.get(key)
        if value != default:
            diff[key] = {"value": value, "default": default}
    emit_json(diff)


@app.command("options", help="Show the per-run option schemas")
def list_run_options(
    flow: str = typer.Option("segment", "--flow", help="segment|glossary"),
) -> None:
    selected = flow.strip().lower()
    if selected == "segment":
        emit_json(SegmentationOptions.model_json_schema())
    elif selected == "glossary":
        emit_json(GlossaryOptions.model_json_schema())
    else:
        raise typer.BadParameter("--flow must be 'segment' or 'glossary'")


def _public_settings(settings: Settings) -> dict[str, Any]:
    return settings.model_dump(exclude=_SECRET_FIELDS)


def _settings_defaults() -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    for name, field in Settings.model_fields.items():
        if name in _SECRET_FIELDS:
            continue
        defaults[name] = field.get_default(call_default_factory=True)
    return defaults
