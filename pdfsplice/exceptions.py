"""Custom exceptions for the :mod:`pdfsplice` package."""

from __future__ import annotations


class PdfSpliceError(Exception):
    """Base exception for all errors raised by :mod:`pdfsplice`."""


class ParseError(PdfSpliceError):
    """Raised when document bytes cannot be parsed as a PDF."""


class ExtractionError(PdfSpliceError):
    """Raised when the text of a document cannot be scanned page by page."""


class GraftError(PdfSpliceError):
    """Raised when an object graph cannot be copied between documents."""


class DanglingReferenceError(GraftError):
    """Raised when a source reference points at an object that does not exist."""

    def __init__(self, idnum: int, generation: int) -> None:
        self.idnum = idnum
        self.generation = generation
        super().__init__(
            f"Object {idnum} {generation} R cannot be resolved in the source document"
        )


class PageTreeError(PdfSpliceError):
    """Raised when the page tree of a document is corrupt."""


class MergeError(PdfSpliceError):
    """Raised when the pages of a document cannot be appended to another."""


class FetchError(PdfSpliceError):
    """Raised when a remote resource cannot be retrieved."""

    def __init__(self, url: str, message: str, *, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ListingError(PdfSpliceError):
    """Raised when the index page does not contain a week list."""


class PipelineError(PdfSpliceError):
    """Raised when a stage of the document pipeline fails."""

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"{stage}: {message}")


__all__ = [
    "PdfSpliceError",
    "ParseError",
    "ExtractionError",
    "GraftError",
    "DanglingReferenceError",
    "PageTreeError",
    "MergeError",
    "FetchError",
    "ListingError",
    "PipelineError",
]
