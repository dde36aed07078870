"""Core document model and helpers."""

from __future__ import annotations

from .document import Document, Page
from .utils import get_logger, resolve_path, write_atomic

__all__ = ["Document", "Page", "get_logger", "resolve_path", "write_atomic"]
