"""Map processing errors onto HTTP responses."""

from __future__ import annotations

import logging

from fastapi import HTTPException

from core.exceptions import InputValidationError

logger = logging.getLogger(__name__)


def to_http_exception(exc: Exception) -> HTTPException:
    """Input problems are 400s; everything else is reported as a 500."""
    if isinstance(exc, InputValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    logger.exception("Request failed")
    return HTTPException(status_code=500, detail=str(exc) or type(exc).__name__)


__all__ = ["to_http_exception"]
