"""Error taxonomy for the rule engine.

Resolution failures are never errors (matchers degrade to "no match").
Everything here is either a rule-authoring bug, a driver decision
(cancellation) or a parser collaborator failure.
"""

from __future__ import annotations


class BugmatchError(Exception):
    """Base class for all engine errors."""


class InvalidSpanError(BugmatchError, ValueError):
    """A source span with a negative start or an end before its start."""

    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end
        super().__init__(f"Invalid source span [{start}, {end})")


class FixConstructionError(BugmatchError, ValueError):
    """A Fix whose patches overlap, are unsorted or fall outside the buffer."""

    def __init__(self, reason: str, patches: tuple[object, ...] = ()) -> None:
        self.reason = reason
        self.patches = patches
        detail = ", ".join(repr(p) for p in patches)
        message = f"Invalid fix: {reason}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class RuleDefinitionError(BugmatchError, ValueError):
    """Bad rule metadata or a rule set with conflicting rules."""


class RuleExecutionError(BugmatchError):
    """An exception escaped a rule while it was evaluating a node."""

    def __init__(self, rule_name: str, location: str, cause: BaseException) -> None:
        self.rule_name = rule_name
        self.location = location
        self.cause = cause
        super().__init__(
            f"Rule '{rule_name}' failed at {location}: {type(cause).__name__}: {cause}"
        )


class ScanCancelledError(BugmatchError):
    """The driver cancelled the scan of a compilation unit."""

    def __init__(self, path: str, reported: int) -> None:
        self.path = path
        self.reported = reported
        super().__init__(
            f"Scan of '{path or '<string>'}' cancelled after {reported} description(s)"
        )


class SourceParseError(BugmatchError):
    """The parser collaborator could not build a syntax tree."""
