"""CLI command groups."""

__all__ = ["config", "export"]

from . import config, export
