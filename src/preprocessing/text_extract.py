"""Plain-text extraction for the glossary flow."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Callable, Dict

import fitz  # PyMuPDF
from bs4 import BeautifulSoup
from docx import Document

from core.exceptions import InputValidationError
from services.io import file_extension

logger = logging.getLogger(__name__)


def extract_text(data: bytes, filename: str) -> str:
    """Return normalized text for a .txt, .pdf, .docx, .html or .htm upload.

    Raises InputValidationError for unsupported types, unreadable files, or
    files with no text.
    """
    extension = file_extension(filename)
    reader = _READERS.get(extension)
    if reader is None:
        raise InputValidationError(f"Unsupported file type: {extension or '(none)'}")

    try:
        raw = reader(data)
    except Exception as exc:
        logger.warning("Failed to parse %s: %s", filename, exc)
        raise InputValidationError(f"Failed to parse {extension} file: {exc}") from exc

    text = normalize_block(raw)
    if not text:
        raise InputValidationError("Could not extract any text from the file")
    return text


def extract_text_from_path(path: Path | str) -> str:
    source = Path(path)
    return extract_text(source.read_bytes(), source.name)


def normalize_block(text: str) -> str:
    """Normalize line endings and trailing whitespace, keeping line breaks."""
    cleaned = text.replace("\r\n", "\n").replace("\r", "\n").replace("\x0c", "\n")
    cleaned = "\n".join(line.rstrip() for line in cleaned.split("\n"))
    return cleaned.strip()


def _read_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="ignore")


def _read_pdf(data: bytes) -> str:
    with fitz.open(stream=data, filetype="pdf") as pdf:
        return "\n".join(page.get_text("text") for page in pdf)


def _read_docx(data: bytes) -> str:
    document = Document(io.BytesIO(data))
    parts = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            parts.append("\t".join(cell.text for cell in row.cells))
    return "\n".join(parts)


def _read_html(data: bytes) -> str:
    soup = BeautifulSoup(data.decode("utf-8", errors="ignore"), "lxml")
    for element in soup(["script", "style"]):
        element.decompose()
    return " ".join(soup.get_text(" ").split())


_READERS: Dict[str, Callable[[bytes], str]] = {
    ".txt": _read_txt,
    ".pdf": _read_pdf,
    ".docx": _read_docx,
    ".html": _read_html,
    ".htm": _read_html,
}


__all__ = ["extract_text", "extract_text_from_path", "normalize_block"]
