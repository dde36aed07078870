"""Single unit of work: augment a primary PDF with the exercises it cites.

The pipeline parses the primary document, extracts the exercise numbers it
mentions, asks a locator where the matching secondary document lives,
fetches and parses it, appends its pages and serializes the result.  Output
bytes are only produced once every step succeeded; any failure surfaces as
:class:`~pdfsplice.exceptions.PipelineError` tagged with the failing stage.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from .core.document import Document
from .exceptions import MergeError, ParseError, PdfSpliceError, PipelineError
from .extract.extractor import PageContentExtractor
from .extract.scanner import DEFAULT_MARKER, ExerciseNumberSet
from .merge.merger import merge_documents

LOGGER = logging.getLogger("pdfsplice.pipeline")

__all__ = [
    "DocumentPipeline",
    "Fetch",
    "Locate",
    "PipelineResult",
    "TemplateLocator",
    "run_pipeline",
]

Locate = Callable[[ExerciseNumberSet], str | None]
Fetch = Callable[[str], bytes]


@dataclass(frozen=True, slots=True)
class TemplateLocator:
    """Substitute the joined exercise numbers into a URL template."""

    template: str
    separator: str = ","

    def __call__(self, numbers: ExerciseNumberSet) -> str | None:
        if not numbers:
            return None
        return self.template.format(numbers=numbers.join(self.separator))


@dataclass(slots=True)
class PipelineResult:
    output: bytes
    numbers: ExerciseNumberSet
    locator: str | None = None
    pages_appended: int = 0

    @property
    def merged(self) -> bool:
        return self.locator is not None


class DocumentPipeline:
    """Parse, extract, fetch, merge and serialize one primary document."""

    def __init__(
        self,
        locate: Locate,
        fetch: Fetch,
        *,
        extractor: PageContentExtractor | None = None,
    ) -> None:
        self.locate = locate
        self.fetch = fetch
        self.extractor = extractor or PageContentExtractor()

    def process(self, primary_bytes: bytes, *, name: str | None = None) -> PipelineResult:
        try:
            primary = Document.from_bytes(primary_bytes, name=name or "primary")
        except ParseError as exc:
            raise PipelineError("parse", str(exc)) from exc

        try:
            numbers = self.extractor.extract(primary)
        except PdfSpliceError as exc:
            raise PipelineError("extract", str(exc)) from exc

        locator = None
        if numbers:
            try:
                locator = self.locate(numbers)
            except Exception as exc:
                LOGGER.error("Failed to locate secondary document for %s: %s", primary.name, exc)
                raise PipelineError("locate", f"Unable to locate exercises {numbers.to_list()}: {exc}") from exc
        pages_appended = 0
        if locator is None:
            LOGGER.info("No secondary document needed for %s", primary.name)
        else:
            pages_appended = self._merge_secondary(primary, locator)

        try:
            output = primary.to_bytes()
        except Exception as exc:
            LOGGER.error("Failed to serialize %s: %s", primary.name, exc)
            raise PipelineError("serialize", f"Unable to serialize {primary.name}: {exc}") from exc

        return PipelineResult(
            output=output,
            numbers=numbers,
            locator=locator,
            pages_appended=pages_appended,
        )

    def run(self, primary_bytes: bytes) -> bytes:
        return self.process(primary_bytes).output

    def _merge_secondary(self, primary: Document, locator: str) -> int:
        LOGGER.info("Fetching secondary document at %s", locator)
        try:
            secondary_bytes = self.fetch(locator)
        except Exception as exc:
            raise PipelineError("fetch", f"Unable to fetch {locator}: {exc}") from exc

        try:
            secondary = Document.from_bytes(secondary_bytes, name=locator)
        except ParseError as exc:
            raise PipelineError("parse-secondary", str(exc)) from exc

        try:
            return merge_documents(primary, secondary)
        except MergeError as exc:
            raise PipelineError("merge", str(exc)) from exc
        except Exception as exc:  # pragma: no cover - dependency exceptions vary
            LOGGER.error("Unexpected failure while merging %s: %s", locator, exc)
            raise PipelineError("merge", f"Unable to merge {locator}: {exc}") from exc


def run_pipeline(
    primary_bytes: bytes,
    locate: Locate,
    fetch: Fetch,
    *,
    marker: str = DEFAULT_MARKER,
) -> bytes:
    """Convenience wrapper around :meth:`DocumentPipeline.run`."""

    pipeline = DocumentPipeline(locate, fetch, extractor=PageContentExtractor(marker))
    return pipeline.run(primary_bytes)
