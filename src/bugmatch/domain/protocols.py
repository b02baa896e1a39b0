from typing import TYPE_CHECKING, Protocol

import astroid

if TYPE_CHECKING:
    from bugmatch.domain.descriptions import Description
    from bugmatch.domain.types import MemberRef, TypeRef


class ResolverProtocol(Protocol):
    """Best-effort symbol/type resolution. Every query returns ``None`` (or empty) on failure."""

    def static_type(self, node: astroid.nodes.NodeNG) -> "TypeRef | None":
        """Static type of an expression node."""
        ...

    def supertypes(self, type_ref: "TypeRef") -> tuple["TypeRef", ...]:
        """Transitive supertype closure, not including ``type_ref`` itself."""
        ...

    def invoked_member(self, call: astroid.nodes.Call) -> "MemberRef | None":
        """Declaration the call binds to."""
        ...

    def receiver(self, call: astroid.nodes.Call) -> astroid.nodes.NodeNG | None:
        """Receiver expression of a qualified call (``recv`` in ``recv.m()``)."""
        ...


class ReporterProtocol(Protocol):
    """Consumer of Descriptions (console, pylint, fix applier...)."""

    def report(self, description: "Description") -> None: ...


class CancellationToken(Protocol):
    """Cooperative cancellation signal; ``threading.Event`` satisfies it."""

    def is_set(self) -> bool: ...
