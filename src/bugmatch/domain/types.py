"""Resolver-supplied identities for types and invoked members."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class TypeRef:
    """
    Static type of an expression, identified by qualified name.

    ``is_class_object`` is set when the expression evaluates to the class
    itself (``Period`` in ``Period.from_(x)``) rather than an instance of it.
    """

    qualified_name: str
    is_class_object: bool = False
    # Resolver-side handle (an astroid ClassDef); not part of the identity.
    declaration: object = field(default=None, compare=False, repr=False)

    def is_same_type(self, qualified_name: str) -> bool:
        return not self.is_class_object and self.qualified_name == qualified_name

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]

    def as_instance(self) -> TypeRef:
        if not self.is_class_object:
            return self
        return TypeRef(self.qualified_name, declaration=self.declaration)


class MemberKind(Enum):
    INSTANCE = "instance"
    CLASS = "class"
    STATIC = "static"

    @property
    def is_instance(self) -> bool:
        return self is MemberKind.INSTANCE


@dataclass(frozen=True)
class MemberRef:
    """The declaration a call binds to."""

    name: str
    owner: TypeRef
    kind: MemberKind
    parameter_types: tuple[str | None, ...] = ()

    @property
    def qualified_name(self) -> str:
        return f"{self.owner.qualified_name}.{self.name}"
