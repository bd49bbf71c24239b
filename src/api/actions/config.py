from typing import Any

from fastapi import APIRouter

from core.config import get_settings

router = APIRouter()

_SECRET_FIELDS = {"langsmith_api_key"}


@router.get("/config", tags=["System"])
async def get_configuration() -> dict[str, Any]:
    """Get current runtime configuration, secrets omitted."""
    return get_settings().model_dump(exclude=_SECRET_FIELDS)
