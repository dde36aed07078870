from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Callable, Mapping, Sequence
import sys

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

HELVETICA = b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>"


def stream_body(content: bytes, entries: str = "") -> bytes:
    header = f"<< {entries} /Length {len(content)} >>".replace("  ", " ").encode("latin-1")
    return header + b"\nstream\n" + content + b"\nendstream"


def build_pdf(objects: Mapping[int, bytes | str], root: int = 1) -> bytes:
    """Serialize hand-written object bodies with a correct xref table."""

    out = bytearray(b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n")
    offsets: dict[int, int] = {}
    for idnum in sorted(objects):
        body = objects[idnum]
        if isinstance(body, str):
            body = body.encode("latin-1")
        offsets[idnum] = len(out)
        out += f"{idnum} 0 obj\n".encode("ascii") + body + b"\nendobj\n"

    size = max(objects) + 1
    xref_offset = len(out)
    out += f"xref\n0 {size}\n".encode("ascii")
    out += b"0000000000 65535 f \n"
    for idnum in range(1, size):
        if idnum in offsets:
            out += f"{offsets[idnum]:010d} 00000 n \n".encode("ascii")
        else:
            out += b"0000000000 00000 f \n"
    out += f"trailer\n<< /Size {size} /Root {root} 0 R >>\nstartxref\n{xref_offset}\n%%EOF\n".encode("ascii")
    return bytes(out)


def text_content(lines: Sequence[str]) -> bytes:
    parts = ["BT", "/F1 12 Tf", "72 720 Td"]
    for index, line in enumerate(lines):
        if index:
            parts.append("0 -24 Td")
        parts.append(f"({line}) Tj")
    parts.append("ET")
    return "\n".join(parts).encode("latin-1")


def build_text_pdf(pages: Sequence[Sequence[str]]) -> bytes:
    """One page per entry of *pages*, each drawing its lines in Helvetica."""

    objects: dict[int, bytes | str] = {3: HELVETICA}
    kids = []
    next_id = 4
    for lines in pages:
        page_id, content_id = next_id, next_id + 1
        next_id += 2
        kids.append(f"{page_id} 0 R")
        objects[page_id] = (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {content_id} 0 R >>"
        )
        objects[content_id] = stream_body(text_content(lines))
    objects[1] = "<< /Type /Catalog /Pages 2 0 R >>"
    objects[2] = f"<< /Type /Pages /Kids [{' '.join(kids)}] /Count {len(kids)} >>"
    return build_pdf(objects)


def build_blank_pdf(sizes: Sequence[tuple[float, float]]) -> bytes:
    writer = PdfWriter()
    for width, height in sizes:
        writer.add_blank_page(width=width, height=height)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def pdf_builder() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture()
def text_pdf_factory() -> Callable[[Sequence[Sequence[str]]], bytes]:
    return build_text_pdf


@pytest.fixture()
def blank_pdf_factory() -> Callable[[Sequence[tuple[float, float]]], bytes]:
    return build_blank_pdf


@pytest.fixture()
def program_pdf() -> bytes:
    """A weekly program citing exercises 12 and 7, then 3."""

    return build_text_pdf(
        [
            ["Programme de colle", "CCINP 12 foo CCINP 7 CCINP 12"],
            ["CCINP 3", "CCINP abc"],
        ]
    )


@pytest.fixture()
def plain_pdf() -> bytes:
    return build_text_pdf([["Programme de colle", "Aucun exercice cette semaine"]])


@pytest.fixture()
def layered_pdf() -> bytes:
    """Two pages under a /Pages node carrying shared inheritable entries.

    Page one inherits /Resources, /MediaBox and /Rotate and carries an
    annotation.  Page two has its own boxes and resources but shares the font
    and one content stream with page one.  Objects 11 and 12 point at each
    other and are not reachable from the catalog.
    """

    return build_pdf(
        {
            1: "<< /Type /Catalog /Pages 2 0 R >>",
            2: (
                "<< /Type /Pages /Kids [3 0 R 4 0 R] /Count 2 /MediaBox [0 0 300 400] "
                "/Resources 5 0 R /Rotate 90 >>"
            ),
            3: (
                "<< /Type /Page /Parent 2 0 R /Contents 6 0 R /CropBox [10 10 290 390] "
                "/Annots [8 0 R] /UserUnit 2 >>"
            ),
            4: (
                "<< /Type /Page /Parent 2 0 R /Contents [7 0 R 6 0 R] /MediaBox [0 0 200 200] "
                "/TrimBox [5 5 195 195] /BleedBox [2 2 198 198] /ArtBox [20 20 180 180] "
                "/Rotate 0 /Resources << /Font << /F1 9 0 R >> >> >>"
            ),
            5: "<< /Font << /F1 9 0 R >> /XObject << /Im1 10 0 R >> >>",
            6: stream_body(b"BT /F1 12 Tf 20 100 Td (Hello) Tj ET"),
            7: stream_body(b"q Q"),
            8: "<< /Type /Annot /Subtype /Text /Rect [0 0 10 10] /Contents (note) >>",
            9: HELVETICA,
            10: stream_body(
                b"\xff",
                "/Type /XObject /Subtype /Image /Width 1 /Height 1 "
                "/ColorSpace /DeviceGray /BitsPerComponent 8",
            ),
            11: "<< /Next 12 0 R >>",
            12: "<< /Prev 11 0 R >>",
        }
    )


@pytest.fixture()
def nested_tree_pdf() -> bytes:
    """A page two levels below the root with boxes set on its ancestors."""

    return build_pdf(
        {
            1: "<< /Type /Catalog /Pages 2 0 R >>",
            2: "<< /Type /Pages /Kids [3 0 R] /Count 1 /MediaBox [0 0 500 500] /UserUnit 3 >>",
            3: "<< /Type /Pages /Parent 2 0 R /Kids [4 0 R] /Count 1 /BleedBox [1 1 499 499] >>",
            4: "<< /Type /Page /Parent 3 0 R /Contents 5 0 R >>",
            5: stream_body(b"q Q"),
        }
    )


@pytest.fixture()
def cyclic_parent_pdf() -> bytes:
    """A page whose /Parent chain loops between objects 5 and 6."""

    return build_pdf(
        {
            1: "<< /Type /Catalog /Pages 2 0 R >>",
            2: "<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
            3: "<< /Type /Page /Parent 5 0 R /MediaBox [0 0 100 100] /Contents 4 0 R >>",
            4: stream_body(b"q Q"),
            5: "<< /Type /Pages /Parent 6 0 R >>",
            6: "<< /Type /Pages /Parent 5 0 R >>",
        }
    )


@pytest.fixture()
def dangling_pdf() -> bytes:
    """Second page refers to object 99, which the file does not define."""

    return build_pdf(
        {
            1: "<< /Type /Catalog /Pages 2 0 R >>",
            2: "<< /Type /Pages /Kids [3 0 R 4 0 R] /Count 2 /MediaBox [0 0 100 100] >>",
            3: "<< /Type /Page /Parent 2 0 R /Contents 5 0 R >>",
            4: "<< /Type /Page /Parent 2 0 R /Contents 99 0 R >>",
            5: stream_body(b"q Q"),
        }
    )


def build_compressed_pdf(pages: Sequence[Sequence[str]]) -> bytes:
    """Text pages whose content streams are FlateDecode encoded."""

    writer = PdfWriter(clone_from=BytesIO(build_text_pdf(pages)))
    for page in writer.pages:
        page.compress_content_streams()
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def compressed_pdf() -> bytes:
    return build_compressed_pdf([["Hello CCINP 4"], ["Second"]])
