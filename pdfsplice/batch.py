"""Process the whole week list, one output file per week."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import time
from typing import Callable, Optional, Sequence

from .config import Settings
from .core.utils import resolve_path, write_atomic
from .exceptions import PdfSpliceError, PipelineError
from .extract.extractor import PageContentExtractor
from .pipeline import DocumentPipeline, Fetch, PipelineResult, TemplateLocator

LOGGER = logging.getLogger("pdfsplice.batch")

__all__ = ["BatchResult", "BatchRunner", "UnitResult", "output_path_for"]

ProgressCallback = Callable[[str, int, int], None]


@dataclass
class UnitResult:
    """Outcome of one week of the batch."""

    week: int
    url: str
    output: Path
    status: str
    numbers: list[int] = field(default_factory=list)
    pages_appended: int = 0
    error: Optional[str] = None


@dataclass
class BatchResult:
    total: int = 0
    success: int = 0
    failure: int = 0
    skipped: int = 0
    results: list[UnitResult] = field(default_factory=list)

    def record(self, result: UnitResult) -> None:
        self.results.append(result)
        if result.status == "success":
            self.success += 1
        elif result.status == "failure":
            self.failure += 1
        elif result.status == "skipped":
            self.skipped += 1

    def __str__(self) -> str:
        return (
            f"BatchResult(total={self.total}, success={self.success}, "
            f"failure={self.failure}, skipped={self.skipped})"
        )


def output_path_for(output_dir: Path, week: int) -> Path:
    return output_dir / f"{week}.pdf"


class BatchRunner:
    """Build the augmented PDF of every week that has no output yet.

    Weeks are processed sequentially with a pause of
    ``settings.request_delay`` seconds before each one that needs network
    access.  A failing week is logged and recorded; the remaining weeks are
    still processed.
    """

    def __init__(
        self,
        fetch: Fetch,
        settings: Settings | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or Settings()
        self.fetch = fetch
        self.sleep = sleep
        self.pipeline = DocumentPipeline(
            TemplateLocator(self.settings.secondary_url_template, self.settings.separator),
            fetch,
            extractor=PageContentExtractor(self.settings.marker),
        )

    def build(self, url: str, output: str | Path) -> PipelineResult:
        """Fetch *url*, augment it and write the result to *output*.

        Nothing is written when any step fails.
        """

        try:
            primary_bytes = self.fetch(url)
        except Exception as exc:
            raise PipelineError("fetch", f"Unable to fetch {url}: {exc}") from exc
        result = self.pipeline.process(primary_bytes, name=url)
        output_path = write_atomic(output, result.output)
        LOGGER.info("Saved augmented PDF to %s", output_path)
        return result

    def run(
        self,
        urls: Sequence[str],
        output_dir: str | Path | None = None,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> BatchResult:
        directory = resolve_path(output_dir if output_dir is not None else self.settings.output_dir)
        batch = BatchResult(total=len(urls))

        for index, url in enumerate(urls):
            week = index + 1
            output = output_path_for(directory, week)
            if output.exists():
                LOGGER.info("Skipping week %d because %s already exists", week, output)
                batch.record(UnitResult(week=week, url=url, output=output, status="skipped"))
            else:
                batch.record(self._process_week(week, url, output))
            if progress_callback is not None:
                progress_callback(url, week, len(urls))

        LOGGER.info("Batch finished: %s", batch)
        return batch

    def _process_week(self, week: int, url: str, output: Path) -> UnitResult:
        if self.settings.request_delay > 0:
            LOGGER.debug("Waiting %.1fs before sending a new request", self.settings.request_delay)
            self.sleep(self.settings.request_delay)

        LOGGER.info("Generating augmented PDF for week %d", week)
        try:
            result = self.build(url, output)
        except PdfSpliceError as exc:
            LOGGER.error("Failed to generate week %d from %s: %s", week, url, exc)
            return UnitResult(week=week, url=url, output=output, status="failure", error=str(exc))
        except OSError as exc:
            LOGGER.error("Failed to write %s: %s", output, exc)
            return UnitResult(week=week, url=url, output=output, status="failure", error=str(exc))

        return UnitResult(
            week=week,
            url=url,
            output=output,
            status="success",
            numbers=result.numbers.to_list(),
            pages_appended=result.pages_appended,
        )
