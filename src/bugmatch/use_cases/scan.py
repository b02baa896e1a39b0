"""Use Case: Scan - walk one compilation unit and report every rule finding."""

import logging

import astroid

from bugmatch.domain.context import CheckContext
from bugmatch.domain.descriptions import Description
from bugmatch.domain.exceptions import RuleExecutionError, ScanCancelledError
from bugmatch.domain.node_kinds import NodeKind, kind_of
from bugmatch.domain.protocols import CancellationToken, ReporterProtocol, ResolverProtocol
from bugmatch.domain.rule_set import EnabledRule, RuleSet
from bugmatch.domain.spans import SourceBuffer
from bugmatch.infrastructure.gateways.astroid_gateway import AstroidResolver, parse_source
from bugmatch.infrastructure.suppression import SuppressionIndex


class Scanner:
    """
    Tree-walking dispatcher.

    Holds only read-only configuration (the RuleSet and resolver), so one
    Scanner can serve many files in turn. All per-file state lives in the
    ``scan`` call. astroid inference shares the process-global
    ``astroid.MANAGER`` caches; run concurrent scans in separate processes.
    """

    def __init__(
        self,
        rule_set: RuleSet,
        resolver: ResolverProtocol | None = None,
        honor_suppressions: bool = True,
    ) -> None:
        self.rule_set = rule_set
        self.resolver = resolver or AstroidResolver()
        self.honor_suppressions = honor_suppressions

    def scan(
        self,
        tree: astroid.nodes.NodeNG,
        buffer: SourceBuffer,
        reporter: ReporterProtocol,
        *,
        path: str = "",
        cancel: CancellationToken | None = None,
    ) -> int:
        """
        Visit every node of ``tree`` once, pre-order in source order.

        Returns the number of Descriptions handed to ``reporter``. Raises
        ScanCancelledError when ``cancel`` is set between two node visits;
        Descriptions already reported stay reported.
        """
        context = CheckContext(buffer=buffer, resolver=self.resolver, path=path)
        suppressions = SuppressionIndex.from_source(buffer.text) if self.honor_suppressions else SuppressionIndex()
        reported = 0
        stack: list[astroid.nodes.NodeNG] = [tree]
        while stack:
            if cancel is not None and cancel.is_set():
                logging.debug("bugmatch: scan of %s cancelled after %d finding(s)", path or "<string>", reported)
                raise ScanCancelledError(path, reported)
            node = stack.pop()
            for description in self._visit(node, context):
                if suppressions and suppressions.is_suppressed(description.rule_name, description.lineno):
                    continue
                reporter.report(description)
                reported += 1
            children = [child for child in node.get_children() if child is not None]
            stack.extend(reversed(children))
        return reported

    def scan_source(
        self,
        text: str,
        reporter: ReporterProtocol,
        *,
        path: str = "",
        module_name: str = "",
        cancel: CancellationToken | None = None,
    ) -> int:
        """Parse ``text`` with astroid and scan it."""
        tree = parse_source(text, module_name=module_name, path=path or None)
        return self.scan(tree, SourceBuffer(text), reporter, path=path, cancel=cancel)

    def _visit(self, node: astroid.nodes.NodeNG, context: CheckContext) -> list[Description]:
        kind = kind_of(node)
        if kind is NodeKind.ERROR:
            return []
        entries = self.rule_set.for_kind(kind)
        if not entries or context.span_of(node) is None:
            return []
        found: list[Description] = []
        for entry in entries:
            description = self._run_rule(entry, node, context)
            if description is not None:
                found.append(description.with_severity(entry.severity))
        return found

    def _run_rule(
        self, entry: EnabledRule, node: astroid.nodes.NodeNG, context: CheckContext
    ) -> Description | None:
        try:
            if not entry.rule.matches(node, context):
                return None
            return entry.rule.on_match(node, context)
        except Exception as exc:
            raise RuleExecutionError(entry.name, context.location(node), exc) from exc
