"""Rendered page text organised as blocks, lines and characters."""

from __future__ import annotations

from dataclasses import dataclass, field
import unicodedata
from typing import Iterator

from ..core.document import Page

__all__ = [
    "TextBlock",
    "TextChar",
    "TextLine",
    "TextPage",
    "decode_char",
    "read_text_page",
    "text_page_from_string",
]

# Control, surrogate, private-use and unassigned code points have no glyph.
_HIDDEN_CATEGORIES = frozenset({"Cc", "Cs", "Co", "Cn"})
_REPLACEMENT_CHARACTER = "\ufffd"


@dataclass(slots=True)
class TextChar:
    char: str | None


@dataclass(slots=True)
class TextLine:
    chars: list[TextChar] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Readable characters of the line; undecodable glyphs are dropped."""

        return "".join(item.char for item in self.chars if item.char is not None)


@dataclass(slots=True)
class TextBlock:
    lines: list[TextLine] = field(default_factory=list)


@dataclass(slots=True)
class TextPage:
    number: int
    blocks: list[TextBlock] = field(default_factory=list)

    def iter_lines(self) -> Iterator[TextLine]:
        for block in self.blocks:
            yield from block.lines


def decode_char(raw: str) -> str | None:
    if raw == _REPLACEMENT_CHARACTER:
        return None
    if unicodedata.category(raw) in _HIDDEN_CATEGORIES:
        return None
    return raw


def text_page_from_string(text: str, number: int) -> TextPage:
    """Group extracted *text* into blocks separated by blank lines."""

    page = TextPage(number=number)
    current: list[TextLine] = []
    for raw_line in text.splitlines():
        if not raw_line.strip():
            if current:
                page.blocks.append(TextBlock(lines=current))
                current = []
            continue
        current.append(TextLine(chars=[TextChar(decode_char(ch)) for ch in raw_line]))
    if current:
        page.blocks.append(TextBlock(lines=current))
    return page


def read_text_page(page: Page) -> TextPage:
    return text_page_from_string(page.node.extract_text(), page.number)
