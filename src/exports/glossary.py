"""Glossary exporters: CSV, JSON and Excel."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any, Iterable, List

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from schemas.internal.glossary import GlossaryTerm

GLOSSARY_COLUMNS: List[str] = ["term", "category", "confidence", "context", "frequency"]
GLOSSARY_SHEET = "Glossary"


def glossary_to_csv(terms: Iterable[GlossaryTerm]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(GLOSSARY_COLUMNS)
    for term in terms:
        writer.writerow([_empty_if_none(value) for value in _row(term)])
    return buffer.getvalue()


def glossary_to_json(terms: Iterable[GlossaryTerm], *, indent: int = 2) -> str:
    payload = [term.model_dump() for term in terms]
    return json.dumps(payload, ensure_ascii=False, indent=indent)


def write_glossary_xlsx(terms: Iterable[GlossaryTerm], output_path: Path) -> int:
    """Write a single-sheet workbook and return the number of term rows."""
    workbook, count = _build_workbook(terms)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output_path)
    return count


def glossary_to_xlsx_bytes(terms: Iterable[GlossaryTerm]) -> bytes:
    workbook, _ = _build_workbook(terms)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _build_workbook(terms: Iterable[GlossaryTerm]) -> tuple[Workbook, int]:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = GLOSSARY_SHEET
    count = _write_sheet(sheet, terms)
    return workbook, count


def _write_sheet(sheet: Worksheet, terms: Iterable[GlossaryTerm]) -> int:
    sheet.append(GLOSSARY_COLUMNS)
    sheet.freeze_panes = "A2"

    count = 0
    for term in terms:
        sheet.append([_empty_if_none(value) for value in _row(term)])
        count += 1

    if sheet.max_column > 0:
        sheet.auto_filter.ref = sheet.dimensions
    return count


def _row(term: GlossaryTerm) -> List[Any]:
    return [term.term, term.category, term.confidence, term.context, term.frequency]


def _empty_if_none(value: Any) -> Any:
    return "" if value is None else value


__all__ = [
    "GLOSSARY_COLUMNS",
    "glossary_to_csv",
    "glossary_to_json",
    "glossary_to_xlsx_bytes",
    "write_glossary_xlsx",
]
