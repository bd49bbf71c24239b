"""Document extraction: plain text and slide layout."""

from .text_extract import extract_text, extract_text_from_path

__all__ = ["extract_text", "extract_text_from_path"]
