"""Splice the exercise sheets cited by a PDF onto the end of that PDF."""

from __future__ import annotations

from pathlib import Path

from .batch import BatchResult, BatchRunner, UnitResult
from .config import Settings
from .core.document import Document, Page
from .exceptions import (
    DanglingReferenceError,
    ExtractionError,
    FetchError,
    GraftError,
    ListingError,
    MergeError,
    PageTreeError,
    ParseError,
    PdfSpliceError,
    PipelineError,
)
from .extract import ExerciseNumberSet, PageContentExtractor, extract_exercise_numbers
from .merge import PAGE_ATTRIBUTES, GraftMap, PageMerger, merge_documents
from .pipeline import DocumentPipeline, PipelineResult, TemplateLocator, run_pipeline

__version__ = "0.1.0"

__all__ = [
    "BatchResult",
    "BatchRunner",
    "DanglingReferenceError",
    "Document",
    "DocumentPipeline",
    "ExerciseNumberSet",
    "ExtractionError",
    "FetchError",
    "GraftError",
    "GraftMap",
    "ListingError",
    "MergeError",
    "PAGE_ATTRIBUTES",
    "Page",
    "PageContentExtractor",
    "PageMerger",
    "PageTreeError",
    "ParseError",
    "PdfSpliceError",
    "PipelineError",
    "PipelineResult",
    "Settings",
    "TemplateLocator",
    "UnitResult",
    "extract_exercise_numbers",
    "merge_documents",
    "merge_files",
    "run_pipeline",
]


def merge_files(primary: str | Path, secondary: str | Path, output: str | Path) -> Path:
    """Append the pages of *secondary* to *primary* and save to *output*."""

    destination = Document.open(primary)
    merge_documents(destination, Document.open(secondary))
    return destination.save(output)
