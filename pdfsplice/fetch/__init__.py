"""Network collaborators for the :mod:`pdfsplice` toolkit."""

from __future__ import annotations

from .http import BROWSER_HEADERS, HttpFetcher
from .listing import extract_week_list, fetch_week_list, parse_week_list

__all__ = ["BROWSER_HEADERS", "HttpFetcher", "extract_week_list", "fetch_week_list", "parse_week_list"]
