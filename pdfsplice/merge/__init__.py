"""Page merging for the :mod:`pdfsplice` toolkit."""

from __future__ import annotations

from .graft import GraftMap
from .merger import PAGE_ATTRIBUTES, PageMerger, merge_documents

__all__ = ["GraftMap", "PAGE_ATTRIBUTES", "PageMerger", "merge_documents"]
