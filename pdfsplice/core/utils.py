"""Utilities shared by pdfsplice modules."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(LOG_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    if level is not None:
        logger.setLevel(level)
    return logger


def resolve_path(path: str | Path | None) -> Path:
    if path is None:
        raise ValueError("Path must not be None")
    resolved = Path(path).expanduser().resolve()
    return resolved


def write_atomic(path: str | Path, data: bytes) -> Path:
    """Write *data* to *path* through a temporary file in the same directory.

    The destination only appears once the payload has been fully written, so
    an interrupted run never leaves a truncated PDF behind.
    """

    destination = resolve_path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile("wb", delete=False, dir=destination.parent, suffix=".tmp") as handle:
        handle.write(data)
        temp_path = Path(handle.name)
    try:
        temp_path.replace(destination)
    except OSError:
        os.unlink(temp_path)
        raise
    return destination


__all__ = ["LOG_FORMAT", "get_logger", "resolve_path", "write_atomic"]
