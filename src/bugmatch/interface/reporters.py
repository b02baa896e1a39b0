"""Reporting collaborators for scan results."""

import logging
import threading

from bugmatch.domain.descriptions import Description, Severity
from bugmatch.domain.protocols import ReporterProtocol

_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.SUGGESTION: logging.INFO,
}


class CollectingReporter(ReporterProtocol):
    """Keeps every Description it receives; safe to share between scanning threads."""

    def __init__(self) -> None:
        self._descriptions: list[Description] = []
        self._lock = threading.Lock()

    def report(self, description: Description) -> None:
        with self._lock:
            self._descriptions.append(description)

    @property
    def descriptions(self) -> list[Description]:
        with self._lock:
            return list(self._descriptions)

    def sorted(self) -> list[Description]:
        """Descriptions in source order (path, then start offset, then rule name)."""
        return sorted(self.descriptions, key=lambda d: d.sort_key)

    def by_rule(self, rule_name: str) -> list[Description]:
        return [d for d in self.descriptions if d.rule_name == rule_name]

    def __len__(self) -> int:
        with self._lock:
            return len(self._descriptions)


class LoggingReporter(ReporterProtocol):
    """Logs each Description at a level matching its severity."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("bugmatch")

    def report(self, description: Description) -> None:
        fix_note = f" [{len(description.fixes)} fix(es)]" if description.fixes else ""
        self._logger.log(
            _LOG_LEVELS[description.severity],
            "%s:%d:%d: %s%s",
            description.path or "<string>",
            description.lineno,
            description.col_offset,
            description.formatted(),
            fix_note,
        )
