"""
Pylint plugin entry point - composition root for the checker plugin.

Load with ``pylint --load-plugins=bugmatch.infrastructure.checker``.
"""

from typing import TYPE_CHECKING

import astroid
from pylint.checkers import BaseChecker

from bugmatch.domain.descriptions import Description
from bugmatch.domain.protocols import ReporterProtocol
from bugmatch.domain.rule_set import default_rule_set
from bugmatch.domain.spans import SourceBuffer
from bugmatch.infrastructure.config_file_loader import ConfigFileLoader
from bugmatch.use_cases.scan import Scanner

if TYPE_CHECKING:
    from pylint.lint import PyLinter


class PylintMessageReporter(ReporterProtocol):
    """Forwards Descriptions of one module to pylint as messages."""

    def __init__(self, checker: "BugmatchChecker", module: astroid.nodes.Module) -> None:
        self._checker = checker
        self._module = module

    def report(self, description: Description) -> None:
        self._checker.add_message(
            self._checker.msgid_for(description),
            line=description.lineno,
            node=self._module,
            args=(description.formatted(),),
            col_offset=description.col_offset,
            end_lineno=description.end_lineno,
            end_col_offset=description.end_col_offset,
        )


class BugmatchChecker(BaseChecker):
    """Runs the configured RuleSet over each module pylint visits."""

    name: str = "bugmatch"

    def __init__(self, linter: "PyLinter", scanner: Scanner) -> None:
        self._scanner = scanner
        self._msg_numbers = {e.name: e.rule.pattern.msgid[1:] for e in scanner.rule_set.entries}
        # The msgid category letter follows the configured severity, not the pattern default.
        self.msgs = {
            f"{e.severity.pylint_letter}{e.rule.pattern.msgid[1:]}": (
                "%s",
                e.rule.pattern.symbol,
                e.rule.pattern.explanation or e.rule.pattern.summary,
            )
            for e in scanner.rule_set.entries
        }
        super().__init__(linter)

    def msgid_for(self, description: Description) -> str:
        return f"{description.severity.pylint_letter}{self._msg_numbers[description.rule_name]}"

    def visit_module(self, node: astroid.nodes.Module) -> None:
        source = self._read_source(node)
        if source is None:
            return
        self._scanner.scan(
            node,
            SourceBuffer(source),
            PylintMessageReporter(self, node),
            path=node.file or "",
        )

    @staticmethod
    def _read_source(node: astroid.nodes.Module) -> str | None:
        stream = node.stream()
        if stream is None:
            return None
        with stream:
            data = stream.read()
        return data.decode(node.file_encoding or "utf-8")


def register(linter: "PyLinter") -> None:
    """Register checkers."""
    config = ConfigFileLoader.load()
    rule_set = default_rule_set().configured(config)
    scanner = Scanner(rule_set, honor_suppressions=config.honor_suppressions)
    linter.register_checker(BugmatchChecker(linter, scanner))
