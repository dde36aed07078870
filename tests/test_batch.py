from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
from pypdf import PdfReader

from pdfsplice.batch import BatchResult, BatchRunner, UnitResult, output_path_for
from pdfsplice.config import Settings
from pdfsplice.exceptions import FetchError, PipelineError

SECONDARY_URL = "https://exercises.test/12,7,3.pdf"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        secondary_url_template="https://exercises.test/{numbers}.pdf",
        request_delay=2.0,
        output_dir=tmp_path / "out",
    )


@pytest.fixture()
def routes(program_pdf: bytes, plain_pdf: bytes, blank_pdf_factory) -> dict[str, bytes]:
    return {
        "https://site.test/week1.pdf": program_pdf,
        "https://site.test/week2.pdf": plain_pdf,
        SECONDARY_URL: blank_pdf_factory([(200, 200)]),
    }


class Router:
    def __init__(self, routes: dict[str, bytes]) -> None:
        self.routes = routes
        self.calls: list[str] = []

    def __call__(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.routes:
            raise FetchError(url, f"HTTP 404 for {url}", status_code=404)
        return self.routes[url]


def test_output_path_for(tmp_path: Path) -> None:
    assert output_path_for(tmp_path, 3) == tmp_path / "3.pdf"


def test_build_writes_augmented_pdf(tmp_path: Path, settings: Settings, routes: dict[str, bytes]) -> None:
    runner = BatchRunner(Router(routes), settings, sleep=lambda seconds: None)
    output = tmp_path / "week1.pdf"

    result = runner.build("https://site.test/week1.pdf", output)

    assert result.pages_appended == 1
    assert len(PdfReader(BytesIO(output.read_bytes())).pages) == 3


def test_build_failure_writes_nothing(tmp_path: Path, settings: Settings) -> None:
    runner = BatchRunner(Router({}), settings, sleep=lambda seconds: None)
    output = tmp_path / "week1.pdf"

    with pytest.raises(PipelineError) as excinfo:
        runner.build("https://site.test/week1.pdf", output)

    assert excinfo.value.stage == "fetch"
    assert not output.exists()


def test_run_processes_each_week(settings: Settings, routes: dict[str, bytes]) -> None:
    router = Router(routes)
    pauses: list[float] = []
    runner = BatchRunner(router, settings, sleep=pauses.append)

    batch = runner.run(["https://site.test/week1.pdf", "https://site.test/week2.pdf"])

    assert (batch.total, batch.success, batch.failure, batch.skipped) == (2, 2, 0, 0)
    assert pauses == [2.0, 2.0]
    assert router.calls == [
        "https://site.test/week1.pdf",
        SECONDARY_URL,
        "https://site.test/week2.pdf",
    ]
    assert batch.results[0].numbers == [12, 7, 3]
    assert batch.results[0].pages_appended == 1
    assert batch.results[1].numbers == []
    out_dir = settings.output_dir.resolve()
    assert (out_dir / "1.pdf").exists()
    assert (out_dir / "2.pdf").read_bytes() == routes["https://site.test/week2.pdf"]


def test_run_skips_existing_outputs(tmp_path: Path, settings: Settings, routes: dict[str, bytes]) -> None:
    out_dir = tmp_path / "existing"
    out_dir.mkdir()
    (out_dir / "1.pdf").write_bytes(b"already built")
    router = Router(routes)
    pauses: list[float] = []

    batch = BatchRunner(router, settings, sleep=pauses.append).run(
        ["https://site.test/week1.pdf", "https://site.test/week2.pdf"],
        out_dir,
    )

    assert batch.skipped == 1
    assert batch.success == 1
    assert batch.results[0].status == "skipped"
    assert pauses == [2.0]
    assert "https://site.test/week1.pdf" not in router.calls
    assert (out_dir / "1.pdf").read_bytes() == b"already built"


def test_run_isolates_failures(tmp_path: Path, settings: Settings, routes: dict[str, bytes]) -> None:
    urls = [
        "https://site.test/week1.pdf",
        "https://site.test/missing.pdf",
        "https://site.test/week2.pdf",
    ]
    progress: list[tuple[str, int, int]] = []

    batch = BatchRunner(Router(routes), settings, sleep=lambda seconds: None).run(
        urls,
        tmp_path,
        progress_callback=lambda url, current, total: progress.append((url, current, total)),
    )

    assert (batch.success, batch.failure, batch.skipped) == (2, 1, 0)
    failed = batch.results[1]
    assert failed.status == "failure"
    assert failed.week == 2
    assert "404" in failed.error
    assert not (tmp_path / "2.pdf").exists()
    assert (tmp_path / "3.pdf").exists()
    assert [entry[1:] for entry in progress] == [(1, 3), (2, 3), (3, 3)]


def test_run_without_delay_does_not_sleep(tmp_path: Path, routes: dict[str, bytes]) -> None:
    settings = Settings(secondary_url_template="https://exercises.test/{numbers}.pdf", request_delay=0)
    pauses: list[float] = []

    BatchRunner(Router(routes), settings, sleep=pauses.append).run(["https://site.test/week2.pdf"], tmp_path)

    assert pauses == []


def test_batch_result_counts() -> None:
    batch = BatchResult(total=3)
    for status in ("success", "failure", "skipped"):
        batch.record(UnitResult(week=1, url="u", output=Path("1.pdf"), status=status))

    assert (batch.success, batch.failure, batch.skipped) == (1, 1, 1)
    assert str(batch) == "BatchResult(total=3, success=1, failure=1, skipped=1)"


def test_run_continues_after_locator_failure(tmp_path: Path, settings: Settings, routes: dict[str, bytes]) -> None:
    def locate(numbers):
        raise KeyError("other")

    runner = BatchRunner(Router(routes), settings, sleep=lambda seconds: None)
    runner.pipeline.locate = locate

    batch = runner.run(["https://site.test/week1.pdf", "https://site.test/week2.pdf"], tmp_path)

    assert (batch.success, batch.failure) == (1, 1)
    assert batch.results[0].status == "failure"
    assert batch.results[0].error.startswith("locate: ")
    assert not (tmp_path / "1.pdf").exists()
    assert (tmp_path / "2.pdf").exists()
