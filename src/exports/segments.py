"""Segment list export."""

from __future__ import annotations

import json
from typing import Iterable

from schemas.internal.segments import Segment


def segments_to_json(segments: Iterable[Segment], *, indent: int = 2) -> str:
    payload = [segment.model_dump(exclude_none=True) for segment in segments]
    return json.dumps(payload, ensure_ascii=False, indent=indent)


__all__ = ["segments_to_json"]
