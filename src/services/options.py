"""Option resolution shared by the runners: explicit value, else default."""

from __future__ import annotations

from typing import Any


def resolve_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "y", "on"}


def resolve_choice(value: Any, default: str) -> str:
    if value is None:
        return default
    return str(value).strip().lower() or default


def resolve_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def resolve_int(value: Any, default: int) -> int:
    if value is None:
        return int(default)
    return int(str(value))


def resolve_optional_int(value: Any, default: int | None) -> int | None:
    if value is None:
        return int(default) if default is not None else None
    return int(str(value))


def resolve_float(value: Any, default: float) -> float:
    if value is None:
        return float(default)
    return float(str(value))


def resolve_optional_float(value: Any, default: float | None) -> float | None:
    if value is None:
        return float(default) if default is not None else None
    return float(str(value))
