"""Configuration for rule selection. Immutable value object created by Infrastructure."""

from __future__ import annotations

import logging

from bugmatch.domain.descriptions import Severity

OFF = "off"


class ConfigurationLoader:
    """
    Immutable rule settings.

    Created from the ``[tool.bugmatch]`` table; Domain does not read the
    filesystem. Infrastructure calls ConfigFileLoader.load_config_from_fs()
    and constructs ConfigurationLoader(config_dict) at the composition root.
    """

    def __init__(self, config_dict: dict[str, object] | None = None) -> None:
        """Set config once at construction. No mutable state after init."""
        self._config: dict[str, object] = dict(config_dict or {})
        self._disabled = frozenset(self._read_disabled())
        self._severities = self._read_severities()

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return dict(self._config)

    @property
    def disabled_rules(self) -> frozenset[str]:
        """Rules turned off by ``disable = [...]`` or a severity of ``off``."""
        return self._disabled

    @property
    def severity_overrides(self) -> dict[str, Severity]:
        return dict(self._severities)

    @property
    def honor_suppressions(self) -> bool:
        """Whether ``# bugmatch: disable=Name`` comments silence findings."""
        raw = self._config.get("honor_suppressions", True)
        if isinstance(raw, bool):
            return raw
        logging.warning("Configuration Warning: 'honor_suppressions' must be a boolean, got %r", raw)
        return True

    def is_enabled(self, rule_name: str) -> bool:
        return rule_name not in self._disabled

    def severity_for(self, rule_name: str, default: Severity) -> Severity:
        return self._severities.get(rule_name, default)

    def _read_disabled(self) -> set[str]:
        disabled: set[str] = set()
        raw = self._config.get("disable", [])
        if isinstance(raw, (list, tuple)):
            disabled.update(str(name) for name in raw if isinstance(name, str))
        else:
            logging.warning("Configuration Warning: 'disable' must be a list of rule names, got %r", raw)
        for name, value in self._raw_severity_table().items():
            if isinstance(value, str) and value.strip().lower() == OFF:
                disabled.add(name)
        return disabled

    def _read_severities(self) -> dict[str, Severity]:
        severities: dict[str, Severity] = {}
        for name, value in self._raw_severity_table().items():
            if not isinstance(value, str):
                logging.warning("Configuration Warning: severity for '%s' must be a string, got %r", name, value)
                continue
            if value.strip().lower() == OFF:
                continue
            severity = Severity.parse(value)
            if severity is None:
                logging.warning(
                    "Configuration Warning: unknown severity '%s' for '%s'; expected one of %s",
                    value,
                    name,
                    ", ".join([s.value for s in Severity] + [OFF]),
                )
                continue
            severities[name] = severity
        return severities

    def _raw_severity_table(self) -> dict[str, object]:
        raw = self._config.get("severity", {})
        if isinstance(raw, dict):
            return {str(k): v for k, v in raw.items()}
        logging.warning("Configuration Warning: 'severity' must be a table, got %r", raw)
        return {}
