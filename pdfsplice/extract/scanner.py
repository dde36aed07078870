"""Marker scanning over lines of rendered text."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

__all__ = [
    "DEFAULT_MARKER",
    "INT32_MAX",
    "INT32_MIN",
    "ExerciseNumberSet",
    "parse_candidate",
    "scan_line",
]

DEFAULT_MARKER = "CCINP "

_SIGNED_INTEGER = re.compile(r"[+-]?[0-9]+")

# Exercise numbers are 32-bit signed integers.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class ExerciseNumberSet:
    """Distinct integers kept in order of first occurrence."""

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[int] = ()) -> None:
        self._values: dict[int, None] = {}
        for value in values:
            self.add(value)

    def add(self, value: int) -> bool:
        """Add *value* and return ``True`` if it was not present yet."""

        if value in self._values:
            return False
        self._values[value] = None
        return True

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._values

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ExerciseNumberSet):
            return self.to_list() == other.to_list()
        if isinstance(other, (list, tuple)):
            return self.to_list() == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ExerciseNumberSet({self.to_list()!r})"

    def to_list(self) -> list[int]:
        return list(self._values)

    def join(self, separator: str = ",") -> str:
        return separator.join(str(value) for value in self._values)


def parse_candidate(candidate: str) -> int | None:
    """Return the integer spelled by *candidate*, or ``None``.

    Values outside the 32-bit signed range are rejected like any other
    non-integer candidate.
    """

    if _SIGNED_INTEGER.fullmatch(candidate) is None:
        return None
    value = int(candidate)
    if not INT32_MIN <= value <= INT32_MAX:
        return None
    return value


def scan_line(line: str, marker: str = DEFAULT_MARKER) -> Iterator[int]:
    """Yield the integers that directly follow *marker* in *line*.

    A candidate runs from the end of the marker to the next space or the end
    of the line.  Candidates that are not 32-bit integers are skipped.
    """

    if not marker:
        raise ValueError("Marker must not be empty")
    position = line.find(marker)
    while position != -1:
        start = position + len(marker)
        end = line.find(" ", start)
        if end == -1:
            end = len(line)
        value = parse_candidate(line[start:end])
        if value is not None:
            yield value
        position = line.find(marker, start)
