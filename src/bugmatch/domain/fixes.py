"""Text patches and suggested fixes.

A Fix is a description of an edit, never the edit itself: every patch is
addressed against the original, unmodified source buffer, and the patches
of one Fix are applied in ascending start order.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field

from bugmatch.domain.exceptions import FixConstructionError
from bugmatch.domain.spans import SourceSpan


@dataclass(frozen=True)
class Patch:
    """Replace the half-open range ``span`` with ``replacement``."""

    span: SourceSpan
    replacement: str

    @property
    def is_deletion(self) -> bool:
        return not self.replacement and not self.span.is_empty

    @property
    def is_insertion(self) -> bool:
        return self.span.is_empty


def _check_ordering(patches: tuple[Patch, ...]) -> None:
    for previous, current in zip(patches, patches[1:]):
        if current.span.start < previous.span.start:
            raise FixConstructionError("patches are not sorted by start offset", (previous, current))
        if previous.span.overlaps(current.span) or current.span.start < previous.span.end:
            raise FixConstructionError("patches overlap", (previous, current))


@dataclass(frozen=True)
class Fix:
    """An ordered, non-overlapping set of patches: one way to remediate a diagnostic."""

    patches: tuple[Patch, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.patches, tuple):
            object.__setattr__(self, "patches", tuple(self.patches))
        _check_ordering(self.patches)

    @property
    def is_empty(self) -> bool:
        return not self.patches

    @property
    def spans(self) -> tuple[SourceSpan, ...]:
        return tuple(p.span for p in self.patches)

    @classmethod
    def replace(cls, span: SourceSpan, text: str) -> Fix:
        return FixBuilder().replace(span, text).build()

    @classmethod
    def delete(cls, span: SourceSpan) -> Fix:
        return FixBuilder().delete(span).build()

    @classmethod
    def merge(cls, *fixes: Fix, description: str = "") -> Fix:
        """Combine fixes into one; raises FixConstructionError if any patches collide."""
        builder = FixBuilder(description=description)
        for fix in fixes:
            builder = builder.merge(fix)
        return builder.build()

    def apply(self, text: str) -> str:
        """Return ``text`` with the patches applied; ``text`` must be the original buffer."""
        if self.patches and self.patches[-1].span.end > len(text):
            raise FixConstructionError("patch extends past the end of the source", (self.patches[-1],))
        pieces: list[str] = []
        cursor = 0
        for patch in self.patches:
            pieces.append(text[cursor:patch.span.start])
            pieces.append(patch.replacement)
            cursor = patch.span.end
        pieces.append(text[cursor:])
        return "".join(pieces)


@dataclass(frozen=True)
class FixBuilder:
    """
    Immutable fix builder.

    Every operation returns a new builder; nothing is validated until
    ``build()``, which sorts the patches (stable, so insertions at one
    offset keep the order they were added in) and rejects overlaps.
    When ``buffer_length`` is set, patches beyond it are rejected too.
    """

    patches: tuple[Patch, ...] = ()
    description: str = ""
    buffer_length: int | None = field(default=None, compare=False)

    def _add(self, span: SourceSpan, text: str) -> FixBuilder:
        return dataclasses.replace(self, patches=(*self.patches, Patch(span, text)))

    def replace(self, span: SourceSpan, text: str) -> FixBuilder:
        return self._add(span, text)

    def replace_range(self, start: int, end: int, text: str) -> FixBuilder:
        return self._add(SourceSpan(start, end), text)

    def delete(self, span: SourceSpan) -> FixBuilder:
        return self._add(span, "")

    def insert_before(self, span: SourceSpan, text: str) -> FixBuilder:
        return self._add(SourceSpan(span.start, span.start), text)

    def insert_after(self, span: SourceSpan, text: str) -> FixBuilder:
        return self._add(SourceSpan(span.end, span.end), text)

    def merge(self, other: Fix | FixBuilder | Iterable[Patch]) -> FixBuilder:
        if isinstance(other, (Fix, FixBuilder)):
            extra = other.patches
        else:
            extra = tuple(other)
        return dataclasses.replace(self, patches=(*self.patches, *extra))

    def with_description(self, description: str) -> FixBuilder:
        return dataclasses.replace(self, description=description)

    @property
    def is_empty(self) -> bool:
        return not self.patches

    def build(self) -> Fix:
        # Insertions at an offset sort ahead of a replacement starting there.
        ordered = tuple(sorted(self.patches, key=lambda p: (p.span.start, not p.span.is_empty)))
        if self.buffer_length is not None:
            outside = tuple(p for p in ordered if p.span.end > self.buffer_length)
            if outside:
                raise FixConstructionError("patch extends past the end of the source", outside)
        return Fix(patches=ordered, description=self.description)
