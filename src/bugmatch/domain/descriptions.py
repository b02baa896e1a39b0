"""Diagnostic model."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from bugmatch.domain.fixes import Fix
from bugmatch.domain.spans import SourceSpan


class Severity(Enum):
    """How serious a finding is; ``ERROR`` findings should fail a build."""

    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"

    @property
    def pylint_letter(self) -> str:
        return {"error": "E", "warning": "W", "suggestion": "C"}[self.value]

    @classmethod
    def parse(cls, value: str) -> Severity | None:
        """Case-insensitive lookup by name; ``None`` for unknown values."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Description:
    """
    One finding of one rule at one node.

    Self-contained: it holds positions and text, not tree nodes, so it can
    be handed to another thread or process once emitted.
    """

    rule_name: str
    severity: Severity
    message: str
    location: SourceSpan
    lineno: int
    col_offset: int
    end_lineno: int | None = None
    end_col_offset: int | None = None
    path: str = ""
    fixes: tuple[Fix, ...] = ()
    link: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.fixes, tuple):
            object.__setattr__(self, "fixes", tuple(self.fixes))

    @property
    def has_fix(self) -> bool:
        return any(not fix.is_empty for fix in self.fixes)

    @property
    def sort_key(self) -> tuple[str, int, int, str]:
        return (self.path, self.location.start, self.location.end, self.rule_name)

    def with_severity(self, severity: Severity) -> Description:
        if severity is self.severity:
            return self
        return replace(self, severity=severity)

    def formatted(self) -> str:
        """Render as ``[RuleName] message`` plus the documentation link, if any."""
        text = f"[{self.rule_name}] {self.message}"
        if self.link:
            text = f"{text}\n  (see {self.link})"
        return text

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for reporters."""
        return {
            "rule": self.rule_name,
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "start": self.location.start,
            "end": self.location.end,
            "line": self.lineno,
            "column": self.col_offset,
            "link": self.link,
            "fixes": [
                {
                    "description": fix.description,
                    "patches": [
                        {"start": p.span.start, "end": p.span.end, "replacement": p.replacement}
                        for p in fix.patches
                    ],
                }
                for fix in self.fixes
            ],
        }
