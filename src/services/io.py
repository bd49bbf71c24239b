"""Upload handling: validation and scoped temporary files."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
import tempfile
from typing import Collection, Iterator

from core.exceptions import InputValidationError

GLOSSARY_EXTENSIONS = frozenset({".txt", ".pdf", ".docx", ".html", ".htm"})
PRESENTATION_EXTENSIONS = frozenset({".pptx"})


def file_extension(filename: str | None) -> str:
    return Path(filename or "").suffix.lower()


def validate_upload(
    filename: str | None,
    size: int,
    *,
    allowed: Collection[str],
    max_bytes: int,
) -> str:
    """Check an upload's name and size; return its lower-cased extension."""
    if not filename:
        raise InputValidationError("No file uploaded")
    extension = file_extension(filename)
    if extension not in allowed:
        expected = ", ".join(sorted(allowed))
        raise InputValidationError(
            f"Invalid file type {extension or '(none)'}; expected one of: {expected}"
        )
    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise InputValidationError(
            f"File too large. Maximum file size is {limit_mb:g}MB."
        )
    return extension


@contextmanager
def temp_upload(data: bytes, *, filename: str | None = None) -> Iterator[Path]:
    """Write upload bytes to a unique temporary file and yield its path.

    The file is removed when the block exits, whether or not it raised.
    """
    suffix = file_extension(filename) or ".bin"
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix, prefix="transeg-") as handle:
        handle.write(data)
        handle.flush()
        path = Path(handle.name)
    try:
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
