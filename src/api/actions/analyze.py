"""Upload endpoints for the glossary and visual segmentation flows."""

from __future__ import annotations

import json
from typing import Annotated, Optional, Type, TypeVar

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError

from api.errors import to_http_exception
from core.config import get_settings
from core.exceptions import InputValidationError
from schemas.requests import DocumentInput, GlossaryOptions, SegmentationOptions
from schemas.responses import GlossaryAnalysisResult, VisualAnalysisResult
from services.glossary_runner import run_glossary_analysis
from services.io import GLOSSARY_EXTENSIONS, PRESENTATION_EXTENSIONS, validate_upload
from services.visual_runner import run_visual_segmentation

router = APIRouter()

OptionsT = TypeVar("OptionsT", bound=BaseModel)


@router.post("/analyze", response_model=GlossaryAnalysisResult, tags=["Analysis"])
async def analyze_document_endpoint(
    file: Annotated[Optional[UploadFile], File()] = None,
    options: Annotated[Optional[str], Form()] = None,
):
    """
    Extract document context and glossary terms.

    Args:
        file: .txt, .pdf, .docx, .html or .htm upload.
        options: JSON string of GlossaryOptions.
    """
    input_data = await _read_upload(file, allowed=GLOSSARY_EXTENSIONS)
    options_obj = _parse_options(options, GlossaryOptions)
    try:
        return await run_in_threadpool(run_glossary_analysis, input_data, options_obj)
    except Exception as exc:
        raise to_http_exception(exc) from exc


@router.post(
    "/analyze-powerpoint", response_model=VisualAnalysisResult, tags=["Analysis"]
)
async def analyze_powerpoint_endpoint(
    file: Annotated[Optional[UploadFile], File()] = None,
    options: Annotated[Optional[str], Form()] = None,
):
    """
    Run visual segmentation on a presentation.

    Args:
        file: .pptx upload.
        options: JSON string of SegmentationOptions.
    """
    input_data = await _read_upload(file, allowed=PRESENTATION_EXTENSIONS)
    options_obj = _parse_options(options, SegmentationOptions)
    try:
        return await run_in_threadpool(run_visual_segmentation, input_data, options_obj)
    except Exception as exc:
        raise to_http_exception(exc) from exc


async def _read_upload(file: UploadFile | None, *, allowed: frozenset[str]) -> DocumentInput:
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    content = await file.read()
    try:
        validate_upload(
            file.filename,
            len(content),
            allowed=allowed,
            max_bytes=get_settings().max_upload_bytes,
        )
        return DocumentInput(data=content, filename=file.filename)
    except InputValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid input: {exc}") from exc


def _parse_options(raw: str | None, model: Type[OptionsT]) -> OptionsT:
    if not raw:
        return model()
    try:
        return model.model_validate(json.loads(raw))
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid options JSON: {exc}") from exc
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=f"Invalid options: {exc}") from exc
