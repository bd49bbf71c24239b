"""Shared helpers for CLI subcommands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

import typer
from pydantic import ValidationError

from schemas.internal.glossary import GlossaryTerm
from schemas.internal.segments import Segment


def load_segments(path: Path) -> List[Segment]:
    """Read segments from a JSON list or an analysis result with ``segments``."""
    items = _load_records(path, key="segments")
    try:
        return [Segment.model_validate(item) for item in items]
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid segment data in {path}: {exc}") from exc


def load_terms(path: Path) -> List[GlossaryTerm]:
    """Read terms from a JSON list or an analysis result with ``terms``."""
    items = _load_records(path, key="terms")
    try:
        return [GlossaryTerm.model_validate(item) for item in items]
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid glossary data in {path}: {exc}") from exc


def preview(text: str, limit: int = 80) -> str:
    cleaned = " ".join(text.split())
    if len(cleaned) <= limit:
        return cleaned
    return cleaned[: limit - 3] + "..."


def _load_records(path: Path, *, key: str) -> list[Any]:
    if not path.exists():
        raise typer.BadParameter(f"File not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON in {path}: {exc}") from exc
    if isinstance(data, dict):
        data = data.get(key)
    if not isinstance(data, list):
        raise typer.BadParameter(f"{path} must hold a JSON list or an object with '{key}'.")
    return data
