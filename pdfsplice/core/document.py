"""PDF document model shared by the extraction and merge stages.

A :class:`Document` wraps the pypdf object graph of a single PDF file.  Read
access goes through a :class:`pypdf.PdfReader`; the first mutating call
clones the document into a :class:`pypdf.PdfWriter` whose object list then
acts as the indirect-object table for everything added afterwards.  Source
documents used by a merge are therefore never copied or modified.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
import logging
from pathlib import Path
from typing import Iterator

from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from pypdf.generic import (
    DecodedStreamObject,
    DictionaryObject,
    EncodedStreamObject,
    IndirectObject,
    NameObject,
    PdfObject,
    StreamObject,
)

from ..exceptions import DanglingReferenceError, GraftError, PageTreeError, ParseError
from .utils import resolve_path, write_atomic

LOGGER = logging.getLogger("pdfsplice.document")

__all__ = ["Document", "Page"]

_PARENT = NameObject("/Parent")
_TYPE = NameObject("/Type")
_PAGE = NameObject("/Page")


@dataclass(slots=True)
class Page:
    """Leaf of a document's page tree."""

    document: "Document"
    index: int
    node: PageObject
    reference: IndirectObject | None

    @property
    def number(self) -> int:
        return self.index + 1

    def get(self, name: str) -> PdfObject | None:
        """Return the raw value stored on the page itself, if any."""

        key = NameObject(name)
        if key not in self.node:
            return None
        return self.node.raw_get(key)

    def get_inheritable(self, name: str) -> PdfObject | None:
        """Return *name* from the page or the closest ancestor defining it.

        The lookup follows ``/Parent`` links one node at a time.  Indirect
        values are returned unresolved so callers can preserve object
        identity when copying them.
        """

        key = NameObject(name)
        node: DictionaryObject = self.node
        visited: set[tuple[int, int]] = set()
        if self.reference is not None:
            visited.add((self.reference.idnum, self.reference.generation))

        while True:
            if key in node:
                return node.raw_get(key)
            if _PARENT not in node:
                return None
            parent = node.raw_get(_PARENT)
            if isinstance(parent, IndirectObject):
                marker = (parent.idnum, parent.generation)
                if marker in visited:
                    raise PageTreeError(
                        f"Cycle in page tree of {self.document.name} at object "
                        f"{parent.idnum} {parent.generation} R"
                    )
                visited.add(marker)
                try:
                    parent = self.document.resolve(parent)
                except GraftError as exc:
                    raise PageTreeError(
                        f"Page {self.number} of {self.document.name} has an unresolvable parent"
                    ) from exc
            if not isinstance(parent, DictionaryObject):
                raise PageTreeError(
                    f"Page {self.number} of {self.document.name} has an invalid /Parent entry"
                )
            node = parent


class Document:
    """In-memory PDF object graph with an ordered page sequence."""

    def __init__(self, reader: PdfReader, *, name: str | None = None, data: bytes | None = None) -> None:
        self.reader = reader
        self.name = name or "<memory>"
        self._data = data
        self._writer: PdfWriter | None = None

    def __repr__(self) -> str:
        state = "mutable" if self.is_mutable else "read-only"
        return f"Document(name={self.name!r}, {state})"

    # -- Construction --------------------------------------------------------

    @classmethod
    def from_bytes(cls, data: bytes, *, name: str | None = None) -> "Document":
        """Parse *data* into a :class:`Document`.

        Raises:
            ParseError: If the bytes are empty, malformed, or encrypted with a
                non-empty password.
        """

        label = name or "<memory>"
        if not data:
            raise ParseError(f"PDF data is empty: {label}")

        try:
            reader = PdfReader(BytesIO(data))
        except PdfReadError as exc:
            raise ParseError(f"Corrupted or invalid PDF: {label}. Error: {exc}") from exc
        except Exception as exc:  # pragma: no cover - dependency exceptions vary
            raise ParseError(f"Unexpected error reading PDF: {label}. Error: {exc}") from exc

        if reader.is_encrypted:
            LOGGER.debug("Attempting to decrypt encrypted PDF %s", label)
            try:
                decrypted = reader.decrypt("")
            except Exception as exc:  # pragma: no cover - decrypt errors vary
                raise ParseError(f"Unable to decrypt encrypted PDF: {label}") from exc
            if decrypted == 0:
                raise ParseError(f"PDF is encrypted with a password: {label}")

        try:
            page_count = len(reader.pages)
        except Exception as exc:
            raise ParseError(f"PDF page tree cannot be read: {label}. Error: {exc}") from exc

        LOGGER.debug("Parsed %s (%d bytes, %d pages)", label, len(data), page_count)
        return cls(reader, name=label, data=data)

    @classmethod
    def open(cls, path: str | Path) -> "Document":
        pdf_path = resolve_path(path)
        try:
            data = pdf_path.read_bytes()
        except OSError as exc:
            raise ParseError(f"Unable to read PDF file: {pdf_path}. Error: {exc}") from exc
        return cls.from_bytes(data, name=str(pdf_path))

    # -- Object space --------------------------------------------------------

    @property
    def is_mutable(self) -> bool:
        return self._writer is not None

    @property
    def writer(self) -> PdfWriter:
        """Return the writable object table, cloning the reader on first use."""

        if self._writer is None:
            LOGGER.debug("Cloning %s into a writable object table", self.name)
            writer = PdfWriter()
            writer.clone_document_from_reader(self.reader)
            self._writer = writer
        return self._writer

    @property
    def _space(self) -> PdfReader | PdfWriter:
        return self._writer if self._writer is not None else self.reader

    @property
    def object_count(self) -> int:
        """Number of live indirect objects in the document."""

        if self._writer is not None:
            return sum(1 for obj in self._writer._objects if obj is not None)
        count = len(self.reader.xref_objStm)
        for generation, offsets in self.reader.xref.items():
            free = self.reader.xref_free_entry.get(generation, {})
            count += sum(1 for idnum in offsets if not free.get(idnum, False))
        return count

    def owns(self, reference: IndirectObject) -> bool:
        return reference.pdf is self.reader or (
            self._writer is not None and reference.pdf is self._writer
        )

    def resolve(self, reference: IndirectObject) -> PdfObject:
        """Return the object *reference* points at.

        Raises:
            DanglingReferenceError: If the object does not exist.
            GraftError: If *reference* belongs to another document.
        """

        if reference.pdf is self.reader:
            if not self._reader_defines(reference):
                raise DanglingReferenceError(reference.idnum, reference.generation)
            try:
                obj = self.reader.get_object(reference)
            except PdfReadError as exc:
                raise GraftError(
                    f"Object {reference.idnum} {reference.generation} R of {self.name} cannot be read"
                ) from exc
        elif self._writer is not None and reference.pdf is self._writer:
            slot = reference.idnum - 1
            objects = self._writer._objects
            obj = objects[slot] if 0 <= slot < len(objects) else None
        else:
            raise GraftError(
                f"Reference {reference.idnum} {reference.generation} R does not belong to {self.name}"
            )

        if obj is None:
            raise DanglingReferenceError(reference.idnum, reference.generation)
        return obj

    def _reader_defines(self, reference: IndirectObject) -> bool:
        reader = self.reader
        if reference.idnum in reader.xref_objStm:
            return True
        offsets = reader.xref.get(reference.generation, {})
        if reference.idnum not in offsets:
            return False
        free = reader.xref_free_entry.get(reference.generation, {})
        return not free.get(reference.idnum, False)

    def add_object(self, obj: PdfObject) -> IndirectObject:
        """Register *obj* in the object table and return its reference."""

        return self.writer._add_object(obj)

    @staticmethod
    def empty_stream_like(stream: StreamObject) -> StreamObject:
        """Return a stream carrying the payload of *stream* but no entries.

        Encoded payloads are copied as stored, so the caller must carry the
        /Filter and /DecodeParms entries over as well.
        """

        if isinstance(stream, EncodedStreamObject):
            duplicate = EncodedStreamObject()
            duplicate._data = stream._data
            return duplicate
        duplicate = DecodedStreamObject()
        duplicate.set_data(stream.get_data())
        return duplicate

    # -- Pages ---------------------------------------------------------------

    @property
    def page_count(self) -> int:
        try:
            return len(self._space.pages)
        except Exception as exc:  # pragma: no cover - dependency exceptions vary
            raise PageTreeError(f"Page tree of {self.name} cannot be read") from exc

    def page(self, index: int) -> Page:
        try:
            node = self._space.pages[index]
        except IndexError:
            raise
        except Exception as exc:  # pragma: no cover - dependency exceptions vary
            raise PageTreeError(f"Page {index + 1} of {self.name} cannot be read") from exc
        return Page(document=self, index=index, node=node, reference=node.indirect_reference)

    def iter_pages(self) -> Iterator[Page]:
        for index in range(self.page_count):
            yield self.page(index)

    @property
    def pages(self) -> list[Page]:
        return list(self.iter_pages())

    def new_page_node(self) -> PageObject:
        """Return an empty ``/Page`` dictionary bound to the writable table."""

        page = PageObject(self.writer)
        page[_TYPE] = _PAGE
        return page

    def append_page(self, node: PageObject) -> Page:
        """Append *node* after the last page of the document.

        Raises:
            PageTreeError: If the page tree rejects the new page.
        """

        writer = self.writer
        reference = getattr(node, "indirect_reference", None)
        if reference is None or reference.pdf is not writer:
            self.add_object(node)
        try:
            added = writer.add_page(node)
        except Exception as exc:
            LOGGER.error("Failed to append page to %s: %s", self.name, exc)
            raise PageTreeError(f"Unable to append page to {self.name}") from exc
        index = len(writer.pages) - 1
        return Page(document=self, index=index, node=added, reference=added.indirect_reference)

    # -- Serialization -------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Serialize the document.

        Documents that were never modified are returned byte for byte.
        """

        if self._writer is None and self._data is not None:
            return self._data
        buffer = BytesIO()
        self.writer.write(buffer)
        return buffer.getvalue()

    def save(self, path: str | Path) -> Path:
        output_path = write_atomic(path, self.to_bytes())
        LOGGER.info("Saved %s to %s", self.name, output_path)
        return output_path
