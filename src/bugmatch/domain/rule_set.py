"""The explicit, immutable set of rules a scan runs."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType

from bugmatch.domain.config import ConfigurationLoader
from bugmatch.domain.descriptions import Severity
from bugmatch.domain.exceptions import RuleDefinitionError
from bugmatch.domain.node_kinds import NodeKind
from bugmatch.domain.rules import Rule
from bugmatch.domain.rules.period_from import PeriodFrom
from bugmatch.domain.rules.protobuf_ordinal import ProtocolBufferOrdinal


@dataclass(frozen=True)
class EnabledRule:
    """A rule together with the severity it reports at in this run."""

    rule: Rule
    severity: Severity

    @property
    def name(self) -> str:
        return self.rule.name


class RuleSet:
    """
    Rules for one analysis run, indexed by node kind.

    Built once at startup and passed to the Scanner; never modified.
    ``configured`` returns a new RuleSet rather than changing this one.
    """

    __slots__ = ("_entries", "_by_kind")

    def __init__(self, rules: Iterable[Rule | EnabledRule]) -> None:
        entries: list[EnabledRule] = []
        seen: dict[str, Rule] = {}
        for item in rules:
            entry = item if isinstance(item, EnabledRule) else EnabledRule(item, item.pattern.severity)
            if entry.name in seen:
                raise RuleDefinitionError(
                    f"Duplicate rule name '{entry.name}': {seen[entry.name]!r} and {entry.rule!r}"
                )
            if entry.rule.node_kind is NodeKind.ERROR:
                raise RuleDefinitionError(f"Rule '{entry.name}' cannot target error placeholder nodes")
            seen[entry.name] = entry.rule
            entries.append(entry)
        self._entries = tuple(entries)
        by_kind: dict[NodeKind, list[EnabledRule]] = {}
        for entry in self._entries:
            by_kind.setdefault(entry.rule.node_kind, []).append(entry)
        self._by_kind = MappingProxyType({k: tuple(v) for k, v in by_kind.items()})

    @property
    def entries(self) -> tuple[EnabledRule, ...]:
        return self._entries

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(e.name for e in self._entries)

    @property
    def node_kinds(self) -> frozenset[NodeKind]:
        return frozenset(self._by_kind)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return any(e.name == name for e in self._entries)

    def for_kind(self, kind: NodeKind) -> tuple[EnabledRule, ...]:
        return self._by_kind.get(kind, ())

    def get(self, name: str) -> EnabledRule | None:
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None

    def configured(self, config: ConfigurationLoader) -> RuleSet:
        """Apply disable lists and severity overrides from configuration."""
        known = set(self.names)
        for name in sorted((config.disabled_rules | set(config.severity_overrides)) - known):
            logging.warning("Configuration Warning: unknown rule '%s' in [tool.bugmatch]", name)
        return RuleSet(
            EnabledRule(e.rule, config.severity_for(e.name, e.severity))
            for e in self._entries
            if config.is_enabled(e.name)
        )

    def __repr__(self) -> str:
        return f"RuleSet({', '.join(self.names)})"


def default_rule_set() -> RuleSet:
    """The bundled example rules at their default severities."""
    return RuleSet([ProtocolBufferOrdinal(), PeriodFrom()])
