"""Append the pages of one document to another."""

from __future__ import annotations

import logging

from pypdf.generic import NameObject

from ..core.document import Document, Page
from ..exceptions import GraftError, MergeError, PageTreeError
from .graft import GraftMap

LOGGER = logging.getLogger("pdfsplice.merge")

# Annotations, form fields and other non-rendering entries are left behind.
PAGE_ATTRIBUTES: tuple[str, ...] = (
    "/Contents",
    "/Resources",
    "/MediaBox",
    "/CropBox",
    "/BleedBox",
    "/TrimBox",
    "/ArtBox",
    "/Rotate",
    "/UserUnit",
)

__all__ = ["PAGE_ATTRIBUTES", "PageMerger", "merge_documents"]


class PageMerger:
    """Copy every page of a source document onto the end of *destination*."""

    attributes: tuple[str, ...] = PAGE_ATTRIBUTES

    def __init__(self, destination: Document) -> None:
        self.destination = destination

    def merge(self, source: Document) -> int:
        """Append all pages of *source* and return how many were added.

        Pages appended before a failure stay in the destination; callers are
        expected to discard the whole destination when :class:`MergeError`
        is raised.
        """

        graft_map = GraftMap(self.destination)
        try:
            pages = source.iter_pages()
            appended = 0
            for page in pages:
                self._append(page, source, graft_map)
                appended += 1
        except PageTreeError as exc:
            LOGGER.error("Failed to merge %s into %s: %s", source.name, self.destination.name, exc)
            raise MergeError(f"Unable to merge {source.name}: {exc}") from exc

        LOGGER.info(
            "Appended %d page(s) from %s to %s (%d object(s) grafted)",
            appended,
            source.name,
            self.destination.name,
            len(graft_map),
        )
        return appended

    def _append(self, page: Page, source: Document, graft_map: GraftMap) -> None:
        node = self.destination.new_page_node()
        for name in self.attributes:
            value = page.get_inheritable(name)
            if value is None:
                continue
            try:
                node[NameObject(name)] = graft_map.graft(value, source)
            except GraftError as exc:
                LOGGER.error("Failed to graft %s of page %d: %s", name, page.number, exc)
                raise MergeError(
                    f"Unable to copy {name} of page {page.number} from {source.name}: {exc}"
                ) from exc
        LOGGER.debug("Appending page %d of %s", page.number, source.name)
        self.destination.add_object(node)
        self.destination.append_page(node)


def merge_documents(destination: Document, source: Document) -> int:
    """Append every page of *source* to *destination*."""

    return PageMerger(destination).merge(source)
