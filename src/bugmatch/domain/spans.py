"""Half-open source ranges and the immutable source buffer they index into."""

from __future__ import annotations

import re
from dataclasses import dataclass

from bugmatch.domain.exceptions import InvalidSpanError

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True, order=True)
class SourceSpan:
    """Character range [start, end) into one source buffer."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise InvalidSpanError(self.start, self.end)

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def overlaps(self, other: SourceSpan) -> bool:
        """True if the spans share a character or an insertion point lies strictly inside the other."""
        if self.is_empty and other.is_empty:
            return False
        if self.is_empty:
            return other.start < self.start < other.end
        if other.is_empty:
            return self.start < other.start < self.end
        return self.start < other.end and other.start < self.end


class SourceBuffer:
    """
    Immutable snapshot of one compilation unit's text.

    astroid reports column offsets as UTF-8 byte offsets (as CPython's ast
    does); every span produced here is in characters of ``text``.
    """

    __slots__ = ("_text", "_line_starts", "_lines")

    def __init__(self, text: str) -> None:
        self._text = text
        starts = [0]
        lines: list[str] = []
        previous = 0
        for match in _LINE_BREAK.finditer(text):
            lines.append(text[previous:match.start()])
            previous = match.end()
            starts.append(previous)
        lines.append(text[previous:])
        self._line_starts = tuple(starts)
        self._lines = tuple(lines)

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line(self, lineno: int) -> str | None:
        """Return line ``lineno`` (1-based) without its terminator."""
        if lineno < 1 or lineno > len(self._lines):
            return None
        return self._lines[lineno - 1]

    def offset(self, lineno: int | None, col_offset: int | None) -> int | None:
        """Convert an astroid (lineno, byte column) position into a character offset."""
        if lineno is None or col_offset is None or col_offset < 0:
            return None
        line = self.line(lineno)
        if line is None:
            return None
        encoded = line.encode("utf-8")
        if col_offset > len(encoded):
            return None
        column = len(encoded[:col_offset].decode("utf-8", errors="ignore"))
        return self._line_starts[lineno - 1] + column

    def position(self, offset: int) -> tuple[int, int]:
        """Convert a character offset back into a (lineno, character column) pair."""
        if offset < 0 or offset > len(self._text):
            raise InvalidSpanError(offset, offset)
        lo, hi = 0, len(self._line_starts) - 1
        while lo < hi:
            mid = (lo + hi + 1) // 2
            if self._line_starts[mid] <= offset:
                lo = mid
            else:
                hi = mid - 1
        return lo + 1, offset - self._line_starts[lo]

    def text_of(self, span: SourceSpan) -> str:
        """Verbatim source for a sub-span."""
        if span.end > len(self._text):
            raise InvalidSpanError(span.start, span.end)
        return self._text[span.start:span.end]

    def contains_span(self, span: SourceSpan) -> bool:
        return span.end <= len(self._text)
