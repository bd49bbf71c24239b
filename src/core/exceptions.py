"""Exception taxonomy for document processing.

Input errors are rejected before any pipeline runs and are never retried.
Analysis errors are fatal for the document being processed.
"""


class TransegError(Exception):
    """Base class for processing errors."""

    pass


class InputValidationError(TransegError, ValueError):
    """Unsupported file type, oversize upload, or no extractable text."""

    pass


class ModelNotConfiguredError(TransegError):
    """A required language model setting is missing."""

    pass


class DocumentAnalysisError(TransegError):
    """Document context or term extraction failed for the whole document."""

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        self.stage = stage


class SegmentationPipelineError(TransegError):
    """The visual segmentation flow could not produce a result."""

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        self.stage = stage


__all__ = [
    "DocumentAnalysisError",
    "InputValidationError",
    "ModelNotConfiguredError",
    "SegmentationPipelineError",
    "TransegError",
]
