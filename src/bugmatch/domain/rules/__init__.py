"""Domain models for rules: pattern metadata and the Rule base class."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

import astroid

from bugmatch.domain.context import CheckContext
from bugmatch.domain.descriptions import Description, Severity
from bugmatch.domain.exceptions import RuleDefinitionError
from bugmatch.domain.fixes import Fix
from bugmatch.domain.matchers import Matcher
from bugmatch.domain.node_kinds import NodeKind

__all__ = [
    "BugPattern",
    "FixPolicy",
    "Rule",
]

_RULE_NAME = re.compile(r"^[A-Z][A-Za-z0-9]*$")
_MSGID = re.compile(r"^[CRWEIF][0-9]{4}$")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class FixPolicy(Enum):
    """Whether a rule offers fixes and whether they can be applied unattended."""

    NONE = "none"
    AUTOMATIC = "automatic"
    REQUIRES_HUMAN_ATTENTION = "requires_human_attention"


@dataclass(frozen=True)
class BugPattern:
    """
    Static metadata of a rule.

    ``name`` is the CamelCase identifier used in configuration and
    suppression comments; ``msgid`` is the pylint message id (e.g. W9701).
    """

    name: str
    summary: str
    severity: Severity
    msgid: str
    explanation: str = ""
    tags: tuple[str, ...] = ()
    fix_policy: FixPolicy = FixPolicy.AUTOMATIC
    link: str | None = None

    def __post_init__(self) -> None:
        if not _RULE_NAME.match(self.name):
            raise RuleDefinitionError(f"Rule name '{self.name}' must be CamelCase")
        if not self.summary:
            raise RuleDefinitionError(f"Rule '{self.name}' has no summary")
        if not _MSGID.match(self.msgid):
            raise RuleDefinitionError(
                f"Rule '{self.name}' has msgid '{self.msgid}'; expected a letter and four digits"
            )

    @property
    def symbol(self) -> str:
        """kebab-case form of the name (``PeriodFrom`` -> ``period-from``)."""
        return _CAMEL_BOUNDARY.sub("-", self.name).lower()


class Rule:
    """
    The unit of checking: a node kind, a matcher and a callback.

    Subclasses set ``pattern`` and ``node_kind`` as class attributes and
    ``matcher`` either as a class attribute or in ``__init__``; after
    construction a rule holds no mutable state and is shared across files
    and threads. ``on_match`` is only called for nodes the matcher accepted
    and returns ``None`` when the match does not warrant a report.
    """

    pattern: ClassVar[BugPattern]
    node_kind: ClassVar[NodeKind]
    matcher: Matcher | None = None

    @property
    def name(self) -> str:
        return self.pattern.name

    def matches(self, node: astroid.nodes.NodeNG, context: CheckContext) -> bool:
        return self.matcher is None or self.matcher.matches(node, context)

    def on_match(self, node: astroid.nodes.NodeNG, context: CheckContext) -> Description | None:
        return self.describe_match(node, context)

    def describe_match(
        self,
        node: astroid.nodes.NodeNG,
        context: CheckContext,
        *fixes: Fix,
        message: str | None = None,
    ) -> Description:
        """Description at ``node`` with the pattern's defaults; empty fixes are dropped."""
        span = context.span_of(node)
        if span is None:
            raise RuleDefinitionError(
                f"Rule '{self.name}' described a node without a source position at {context.location(node)}"
            )
        lineno, col_offset = context.buffer.position(span.start)
        end_lineno, end_col_offset = context.buffer.position(span.end)
        return Description(
            rule_name=self.pattern.name,
            severity=self.pattern.severity,
            message=message or self.pattern.summary,
            location=span,
            lineno=lineno,
            col_offset=col_offset,
            end_lineno=end_lineno,
            end_col_offset=end_col_offset,
            path=context.path,
            fixes=tuple(fix for fix in fixes if not fix.is_empty),
            link=self.pattern.link,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pattern.name})"
