"""Per-file, read-only state handed to matchers and rules."""

from __future__ import annotations

from dataclasses import dataclass

import astroid

from bugmatch.domain.fixes import FixBuilder
from bugmatch.domain.protocols import ResolverProtocol
from bugmatch.domain.spans import SourceBuffer, SourceSpan
from bugmatch.domain.types import MemberRef, TypeRef


@dataclass(frozen=True)
class CheckContext:
    """
    Visitor state for one compilation unit.

    Owned by the scanner for the duration of one file; rules only read it.
    Span helpers return ``None`` for nodes without a source position
    (synthesized or recovered nodes).
    """

    buffer: SourceBuffer
    resolver: ResolverProtocol
    path: str = ""

    def span_of(self, node: astroid.nodes.NodeNG) -> SourceSpan | None:
        if isinstance(node, astroid.nodes.Module):
            return SourceSpan(0, len(self.buffer))
        start = self.buffer.offset(getattr(node, "lineno", None), getattr(node, "col_offset", None))
        end = self.buffer.offset(getattr(node, "end_lineno", None), getattr(node, "end_col_offset", None))
        if start is None or end is None or end < start:
            return None
        return SourceSpan(start, end)

    def start_offset(self, node: astroid.nodes.NodeNG) -> int | None:
        span = self.span_of(node)
        return span.start if span else None

    def end_offset(self, node: astroid.nodes.NodeNG) -> int | None:
        span = self.span_of(node)
        return span.end if span else None

    def source_for(self, node: astroid.nodes.NodeNG) -> str | None:
        """Verbatim source text of ``node``."""
        span = self.span_of(node)
        if span is None:
            return None
        return self.buffer.text_of(span)

    def fix_builder(self) -> FixBuilder:
        """A builder bound to this buffer, so out-of-range patches are rejected."""
        return FixBuilder(buffer_length=len(self.buffer))

    def static_type(self, node: astroid.nodes.NodeNG) -> TypeRef | None:
        return self.resolver.static_type(node)

    def invoked_member(self, call: astroid.nodes.Call) -> MemberRef | None:
        return self.resolver.invoked_member(call)

    def receiver(self, call: astroid.nodes.Call) -> astroid.nodes.NodeNG | None:
        return self.resolver.receiver(call)

    def location(self, node: astroid.nodes.NodeNG) -> str:
        """``path:line:col`` for messages."""
        return f"{self.path or '<string>'}:{getattr(node, 'lineno', 0)}:{getattr(node, 'col_offset', 0)}"
