"""Week list extraction from the course index page."""

from __future__ import annotations

import logging
from typing import Callable

from ..exceptions import ListingError

LOGGER = logging.getLogger("pdfsplice.fetch")

__all__ = ["extract_week_list", "fetch_week_list", "parse_week_list"]

_LINK_MARKER = '<li><a href="'
_LIST_START = "<ol>"
_LIST_END = "</ol>"


def parse_week_list(html: str) -> list[str]:
    """Return the link targets of ``<li><a href="...">`` items in order."""

    links: list[str] = []
    position = 0
    while True:
        start = html.find(_LINK_MARKER, position)
        if start == -1:
            break
        start += len(_LINK_MARKER)
        end = html.find('"', start)
        if end == -1:
            break
        links.append(html[start:end])
        position = end + 1
    return links


def extract_week_list(html: str) -> list[str]:
    """Return the week links found in the first ordered list of *html*.

    Raises:
        ListingError: If the page has no ``<ol>`` section.
    """

    start = html.find(_LIST_START)
    if start == -1:
        raise ListingError("Failed to find the start of the week list")
    start += len(_LIST_START)
    end = html.find(_LIST_END, start)
    if end == -1:
        raise ListingError("Failed to find the end of the week list")
    return parse_week_list(html[start:end])


def fetch_week_list(fetch_text: Callable[[str], str], url: str) -> list[str]:
    LOGGER.info("Fetching week list at %s", url)
    weeks = extract_week_list(fetch_text(url))
    LOGGER.info("Found %d week(s) at %s", len(weeks), url)
    return weeks
