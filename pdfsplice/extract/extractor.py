"""Recover the exercise numbers referenced by a document."""

from __future__ import annotations

import logging
from typing import Iterator

from ..core.document import Document
from ..exceptions import ExtractionError
from .scanner import DEFAULT_MARKER, ExerciseNumberSet, scan_line
from .text import TextPage, read_text_page

LOGGER = logging.getLogger("pdfsplice.extract")

__all__ = ["PageContentExtractor", "extract_exercise_numbers", "iter_text_pages"]


def iter_text_pages(document: Document) -> Iterator[TextPage]:
    """Yield the rendered text of every page of *document* in order."""

    try:
        page_count = document.page_count
    except Exception as exc:
        raise ExtractionError(f"Unable to enumerate pages of {document.name}") from exc

    for index in range(page_count):
        try:
            page = document.page(index)
            text_page = read_text_page(page)
        except Exception as exc:
            LOGGER.error("Failed to read text of page %d of %s: %s", index + 1, document.name, exc)
            raise ExtractionError(
                f"Unable to read text of page {index + 1} of {document.name}"
            ) from exc
        yield text_page


class PageContentExtractor:
    """Scan a document's text for integers following a fixed marker."""

    def __init__(self, marker: str = DEFAULT_MARKER) -> None:
        if not marker:
            raise ValueError("Marker must not be empty")
        self.marker = marker

    def extract(self, document: Document) -> ExerciseNumberSet:
        numbers = ExerciseNumberSet()
        for text_page in iter_text_pages(document):
            for line in text_page.iter_lines():
                for value in scan_line(line.text, self.marker):
                    if numbers.add(value):
                        LOGGER.debug("Found %r%s on page %d", self.marker, value, text_page.number)
        LOGGER.info("Extracted %d exercise number(s) from %s: %s", len(numbers), document.name, numbers.to_list())
        return numbers


def extract_exercise_numbers(document: Document, *, marker: str = DEFAULT_MARKER) -> ExerciseNumberSet:
    """Convenience wrapper around :meth:`PageContentExtractor.extract`."""

    return PageContentExtractor(marker).extract(document)
