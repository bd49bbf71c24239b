"""Glossary and segment exporters."""

from .glossary import glossary_to_csv, glossary_to_json, glossary_to_xlsx_bytes, write_glossary_xlsx
from .segments import segments_to_json
from .xliff import render_xliff

__all__ = [
    "glossary_to_csv",
    "glossary_to_json",
    "glossary_to_xlsx_bytes",
    "render_xliff",
    "segments_to_json",
    "write_glossary_xlsx",
]
