"""Identity-preserving copy of object graphs between documents."""

from __future__ import annotations

import copy
import logging

from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    NullObject,
    PdfObject,
    StreamObject,
)

from ..core.document import Document
from ..exceptions import GraftError

LOGGER = logging.getLogger("pdfsplice.merge")

__all__ = ["GraftMap"]

GraftKey = tuple[int, int, int]


def _empty_like(obj: PdfObject) -> DictionaryObject | ArrayObject:
    if isinstance(obj, StreamObject):
        return Document.empty_stream_like(obj)
    if isinstance(obj, DictionaryObject):
        return DictionaryObject()
    return ArrayObject()


class GraftMap:
    """Copy objects from source documents into *destination*.

    The map remembers every indirect object it has copied, keyed by the
    source object space and object identity.  Grafting the same source object
    again returns the reference created the first time, so shared resources
    stay shared and cyclic graphs terminate.  A map is meant to live for a
    single merge operation.
    """

    def __init__(self, destination: Document) -> None:
        self.destination = destination
        self._writer = destination.writer
        self._mapping: dict[GraftKey, IndirectObject] = {}

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, reference: object) -> bool:
        if not isinstance(reference, IndirectObject):
            return False
        return self._key(reference) in self._mapping

    @staticmethod
    def _key(reference: IndirectObject) -> GraftKey:
        return (id(reference.pdf), reference.idnum, reference.generation)

    def graft(self, obj: PdfObject, source: Document) -> PdfObject:
        """Return the destination equivalent of *obj* taken from *source*.

        Raises:
            DanglingReferenceError: If *obj* refers to an object missing from
                *source*.
            GraftError: If the destination cannot store a copied object.
        """

        if isinstance(obj, IndirectObject):
            return self._graft_reference(obj, source)
        reference = getattr(obj, "indirect_reference", None)
        if isinstance(reference, IndirectObject) and source.owns(reference):
            return self._graft_reference(reference, source)
        return self._copy(obj, source)

    def _graft_reference(self, reference: IndirectObject, source: Document) -> IndirectObject:
        key = self._key(reference)
        existing = self._mapping.get(key)
        if existing is not None:
            return existing

        if not source.owns(reference):
            raise GraftError(
                f"Reference {reference.idnum} {reference.generation} R does not belong to {source.name}"
            )
        target = source.resolve(reference)

        if isinstance(target, (DictionaryObject, ArrayObject)):
            # Allocate before copying children so back-references find the slot.
            container = _empty_like(target)
            grafted = self._allocate(container)
            self._mapping[key] = grafted
            self._fill(container, target, source)
        else:
            grafted = self._allocate(self._copy(target, source))
            self._mapping[key] = grafted

        LOGGER.debug(
            "Grafted object %s %s R from %s as %s %s R",
            reference.idnum,
            reference.generation,
            source.name,
            grafted.idnum,
            grafted.generation,
        )
        return grafted

    def _allocate(self, obj: PdfObject) -> IndirectObject:
        try:
            return self.destination.add_object(obj)
        except Exception as exc:
            LOGGER.error("Failed to allocate object in %s: %s", self.destination.name, exc)
            raise GraftError(f"Unable to allocate object in {self.destination.name}") from exc

    def _copy(self, obj: PdfObject | None, source: Document) -> PdfObject:
        if obj is None:
            return NullObject()
        if isinstance(obj, (DictionaryObject, ArrayObject)):
            container = _empty_like(obj)
            self._fill(container, obj, source)
            return container
        duplicate = copy.copy(obj)
        if getattr(duplicate, "indirect_reference", None) is not None:
            duplicate.indirect_reference = None
        return duplicate

    def _fill(
        self,
        container: DictionaryObject | ArrayObject,
        original: DictionaryObject | ArrayObject,
        source: Document,
    ) -> None:
        if isinstance(original, DictionaryObject):
            for key in list(original.keys()):
                value = original.raw_get(key)
                container[NameObject(str(key))] = self.graft(value, source)
            return
        for item in list(original):
            container.append(self.graft(item, source))
