"""Routing helpers for the analysis graphs."""

from __future__ import annotations

from typing import Any, Literal, Mapping


def stage_outcome(state: Mapping[str, Any]) -> Literal["continue", "failed"]:
    """Route to the terminal failed state once a stage has recorded a failure."""
    status = str(state.get("status") or "").strip().lower()
    return "failed" if status == "failed" else "continue"


__all__ = ["stage_outcome"]
