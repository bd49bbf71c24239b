"""Core configuration and shared utilities."""

from dotenv import load_dotenv

from .config import Settings, get_settings
from .exceptions import (
    DocumentAnalysisError,
    InputValidationError,
    ModelNotConfiguredError,
    SegmentationPipelineError,
    TransegError,
)

load_dotenv()

__all__ = [
    "DocumentAnalysisError",
    "InputValidationError",
    "ModelNotConfiguredError",
    "SegmentationPipelineError",
    "Settings",
    "TransegError",
    "get_settings",
]
