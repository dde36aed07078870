"""Text scanning helpers for the :mod:`pdfsplice` toolkit."""

from __future__ import annotations

from .extractor import PageContentExtractor, extract_exercise_numbers, iter_text_pages
from .scanner import DEFAULT_MARKER, ExerciseNumberSet, parse_candidate, scan_line
from .text import TextBlock, TextChar, TextLine, TextPage, read_text_page, text_page_from_string

__all__ = [
    "DEFAULT_MARKER",
    "ExerciseNumberSet",
    "PageContentExtractor",
    "TextBlock",
    "TextChar",
    "TextLine",
    "TextPage",
    "extract_exercise_numbers",
    "iter_text_pages",
    "parse_candidate",
    "read_text_page",
    "scan_line",
    "text_page_from_string",
]
