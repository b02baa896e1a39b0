"""
Composable predicates over astroid nodes.

Every matcher is a frozen value: evaluating it twice against the same node
and context gives the same answer, and building a new matcher never changes
an existing one. Type and symbol questions go through the context's
resolver, which answers ``None`` when it cannot resolve; matchers turn that
into ``False`` rather than raising.

Typical use::

    PROTO_ORDINAL = instance_method().on_descendant_of("google.protobuf.ProtocolMessageEnum").named("ordinal")
    PERIOD_FROM = static_method().on_class("temporal.Period").named("from_")
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Self

import astroid

from bugmatch.domain.context import CheckContext
from bugmatch.domain.node_kinds import NodeKind, kind_of
from bugmatch.domain.types import MemberKind, MemberRef, TypeRef


class Matcher(ABC):
    """Stateless predicate ``(node, context) -> bool``."""

    @abstractmethod
    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        ...

    def __and__(self, other: Matcher) -> Matcher:
        return all_of(self, other)

    def __or__(self, other: Matcher) -> Matcher:
        return any_of(self, other)

    def __invert__(self) -> Matcher:
        return not_(self)


@dataclass(frozen=True)
class AllOf(Matcher):
    matchers: tuple[Matcher, ...]

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        return all(m.matches(node, context) for m in self.matchers)


@dataclass(frozen=True)
class AnyOf(Matcher):
    matchers: tuple[Matcher, ...]

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        return any(m.matches(node, context) for m in self.matchers)


@dataclass(frozen=True)
class Not(Matcher):
    matcher: Matcher

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        return not self.matcher.matches(node, context)


@dataclass(frozen=True)
class KindIs(Matcher):
    kinds: frozenset[NodeKind]

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        return kind_of(node) in self.kinds


@dataclass(frozen=True)
class IsSameType(Matcher):
    """The node's static type is exactly ``qualified_name`` (an instance, not the class object)."""

    qualified_name: str

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        type_ref = context.static_type(node)
        return type_ref is not None and type_ref.is_same_type(self.qualified_name)


@dataclass(frozen=True)
class IsSubtypeOf(Matcher):
    """The node's static type, or one of its transitive supertypes, is ``qualified_name``."""

    qualified_name: str

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        type_ref = context.static_type(node)
        if type_ref is None or type_ref.is_class_object:
            return False
        return _descends_from(type_ref, self.qualified_name, context)


@dataclass(frozen=True)
class Argument(Matcher):
    """Positional argument ``index`` of a call satisfies ``matcher``."""

    index: int
    matcher: Matcher

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        if not isinstance(node, astroid.nodes.Call):
            return False
        args = node.args or []
        if self.index < 0 or self.index >= len(args):
            return False
        return self.matcher.matches(args[self.index], context)


@dataclass(frozen=True)
class ReceiverOfInvocation(Matcher):
    matcher: Matcher

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        if not isinstance(node, astroid.nodes.Call):
            return False
        receiver = context.receiver(node)
        return receiver is not None and self.matcher.matches(receiver, context)


@dataclass(frozen=True)
class HasArgumentCount(Matcher):
    count: int

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        return isinstance(node, astroid.nodes.Call) and _argument_count(node) == self.count


def _argument_count(call: astroid.nodes.Call) -> int:
    return len(call.args or []) + len(call.keywords or [])


def _descends_from(type_ref: TypeRef, qualified_name: str, context: CheckContext) -> bool:
    if type_ref.qualified_name == qualified_name:
        return True
    return any(s.qualified_name == qualified_name for s in context.resolver.supertypes(type_ref))


@dataclass(frozen=True)
class _MethodMatcher(Matcher):
    """Shared selector state for instance/static method matchers."""

    names: frozenset[str] | None = None
    argument_count: int | None = None
    parameters: tuple[str, ...] | None = None

    def named(self, name: str) -> Self:
        return dataclasses.replace(self, names=frozenset({name}))

    def named_any_of(self, *names: str) -> Self:
        return dataclasses.replace(self, names=frozenset(names))

    def with_argument_count(self, count: int) -> Self:
        return dataclasses.replace(self, argument_count=count)

    def with_parameters(self, *qualified_names: str) -> Self:
        """Declared parameter annotations (excluding ``self``/``cls``) resolve to these types, in order."""
        return dataclasses.replace(self, parameters=tuple(qualified_names))

    def _selector_matches(self, call: astroid.nodes.Call, member: MemberRef) -> bool:
        if self.names is not None and member.name not in self.names:
            return False
        if self.argument_count is not None and _argument_count(call) != self.argument_count:
            return False
        if self.parameters is not None and member.parameter_types != self.parameters:
            return False
        return True


@dataclass(frozen=True)
class InstanceMethodMatcher(_MethodMatcher):
    """Call of an instance method through an instance receiver."""

    owner: str | None = None
    exact_owner: bool = False

    def on_descendant_of(self, qualified_name: str) -> InstanceMethodMatcher:
        return dataclasses.replace(self, owner=qualified_name, exact_owner=False)

    def on_exact_class(self, qualified_name: str) -> InstanceMethodMatcher:
        return dataclasses.replace(self, owner=qualified_name, exact_owner=True)

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        if not isinstance(node, astroid.nodes.Call):
            return False
        receiver = context.receiver(node)
        if receiver is None:
            return False
        member = context.invoked_member(node)
        if member is None or member.kind is not MemberKind.INSTANCE:
            return False
        if not self._selector_matches(node, member):
            return False
        receiver_type = context.static_type(receiver)
        if receiver_type is None or receiver_type.is_class_object:
            return False
        if self.owner is None:
            return True
        if self.exact_owner:
            return receiver_type.qualified_name == self.owner
        return _descends_from(receiver_type, self.owner, context)


@dataclass(frozen=True)
class StaticMethodMatcher(_MethodMatcher):
    """Call of a staticmethod or classmethod, through the class or an instance."""

    owner: str | None = None

    def on_class(self, qualified_name: str) -> StaticMethodMatcher:
        return dataclasses.replace(self, owner=qualified_name)

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        if not isinstance(node, astroid.nodes.Call):
            return False
        member = context.invoked_member(node)
        if member is None or member.kind is MemberKind.INSTANCE:
            return False
        if not self._selector_matches(node, member):
            return False
        return self.owner is None or member.owner.qualified_name == self.owner


def all_of(*matchers: Matcher) -> Matcher:
    return AllOf(tuple(matchers))


def any_of(*matchers: Matcher) -> Matcher:
    return AnyOf(tuple(matchers))


def not_(matcher: Matcher) -> Matcher:
    return Not(matcher)


def kind_is(*kinds: NodeKind) -> Matcher:
    return KindIs(frozenset(kinds))


def is_same_type(qualified_name: str) -> Matcher:
    return IsSameType(qualified_name)


def is_subtype_of(qualified_name: str) -> Matcher:
    return IsSubtypeOf(qualified_name)


def argument(index: int, matcher: Matcher) -> Matcher:
    return Argument(index, matcher)


def receiver_of_invocation(matcher: Matcher) -> Matcher:
    return ReceiverOfInvocation(matcher)


def has_argument_count(count: int) -> Matcher:
    return HasArgumentCount(count)


def instance_method() -> InstanceMethodMatcher:
    return InstanceMethodMatcher()


def static_method() -> StaticMethodMatcher:
    return StaticMethodMatcher()
