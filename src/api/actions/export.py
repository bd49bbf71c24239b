"""Export endpoints for reviewed segments and glossary terms."""

from __future__ import annotations

from typing import Literal
from urllib.parse import quote

from fastapi import APIRouter, Query
from fastapi.responses import Response

from exports.glossary import glossary_to_csv, glossary_to_json, glossary_to_xlsx_bytes
from exports.xliff import render_xliff
from schemas.requests import GlossaryExportRequest, XliffExportRequest

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.post("/export/xliff", tags=["Export"])
async def export_xliff(request: XliffExportRequest) -> Response:
    document = render_xliff(
        request.segments,
        source_language=request.source_language,
        target_language=request.target_language,
        original=request.original,
    )
    return Response(
        content=document,
        media_type="application/x-xliff+xml",
        headers=_attachment(f"{request.original}.xlf"),
    )


@router.post("/export/glossary", tags=["Export"])
async def export_glossary(
    request: GlossaryExportRequest,
    format: Literal["csv", "json", "xlsx"] = Query("csv", description="Output format."),
) -> Response:
    if format == "json":
        return Response(
            content=glossary_to_json(request.terms),
            media_type="application/json",
            headers=_attachment("glossary.json"),
        )
    if format == "xlsx":
        return Response(
            content=glossary_to_xlsx_bytes(request.terms),
            media_type=XLSX_MEDIA_TYPE,
            headers=_attachment("glossary.xlsx"),
        )
    return Response(
        content=glossary_to_csv(request.terms),
        media_type="text/csv",
        headers=_attachment("glossary.csv"),
    )


def _attachment(filename: str) -> dict[str, str]:
    quoted = quote(filename)
    if quoted != filename:
        return {"Content-Disposition": f"attachment; filename*=utf-8''{quoted}"}
    return {"Content-Disposition": f'attachment; filename="{filename}"'}
