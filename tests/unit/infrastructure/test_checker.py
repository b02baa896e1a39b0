"""Unit tests for the pylint plugin (BugmatchChecker and register)."""

from unittest.mock import MagicMock, patch

from bugmatch.domain.config import ConfigurationLoader
from bugmatch.domain.rule_set import default_rule_set
from bugmatch.infrastructure.checker import BugmatchChecker, register
from bugmatch.use_cases.scan import Scanner


def _checker(rule_set=None) -> BugmatchChecker:
    checker = BugmatchChecker(MagicMock(), Scanner(rule_set or default_rule_set()))
    checker.add_message = MagicMock()
    return checker


class TestBugmatchChecker:
    """Messages declared from the rule set and emitted per Description."""

    def test_msgs_follow_rule_set(self) -> None:
        checker = _checker()
        assert set(checker.msgs) == {"W9701", "E9702"}
        assert checker.msgs["E9702"][1] == "period-from"
        assert checker.msgs["W9701"][0] == "%s"

    def test_disabled_rules_have_no_message(self) -> None:
        rules = default_rule_set().configured(ConfigurationLoader({"disable": ["PeriodFrom"]}))
        assert set(_checker(rules).msgs) == {"W9701"}

    def test_visit_module_adds_message_per_finding(self, protobuf_module) -> None:
        """Two enum ordinal() calls in the example module give two W9701 messages."""
        checker = _checker()
        checker.visit_module(protobuf_module.tree)
        calls = checker.add_message.call_args_list
        assert [c.args[0] for c in calls] == ["W9701", "W9701"]
        first = calls[0].kwargs
        assert first["node"] is protobuf_module.tree
        assert first["args"][0].startswith("[ProtocolBufferOrdinal]")
        start = protobuf_module.text.index("color.ordinal()")
        assert (first["line"], first["col_offset"]) == protobuf_module.context.buffer.position(start)

    def test_visit_module_reports_period_from(self, temporal_module) -> None:
        checker = _checker()
        checker.visit_module(temporal_module.tree)
        assert [c.args[0] for c in checker.add_message.call_args_list] == ["E9702", "E9702"]

    def test_severity_override_changes_msgid(self, protobuf_module) -> None:
        """A configured severity reaches pylint as the msgid category letter."""
        config = ConfigurationLoader({"severity": {"ProtocolBufferOrdinal": "error", "PeriodFrom": "suggestion"}})
        checker = _checker(default_rule_set().configured(config))
        assert set(checker.msgs) == {"E9701", "C9702"}
        assert checker.msgs["E9701"][1] == "protocol-buffer-ordinal"
        checker.visit_module(protobuf_module.tree)
        assert [c.args[0] for c in checker.add_message.call_args_list] == ["E9701", "E9701"]

    def test_module_without_source_is_skipped(self) -> None:
        checker = _checker()
        module = MagicMock()
        module.stream.return_value = None
        checker.visit_module(module)
        checker.add_message.assert_not_called()


class TestCheckerRegister:
    """Test register(linter) entry point."""

    def test_register_uses_file_configuration(self) -> None:
        """register() registers one checker built from [tool.bugmatch]."""
        linter = MagicMock()
        with patch(
            "bugmatch.infrastructure.checker.ConfigFileLoader.load",
            return_value=ConfigurationLoader({"disable": ["ProtocolBufferOrdinal"]}),
        ) as load:
            register(linter)

        load.assert_called_once()
        linter.register_checker.assert_called_once()
        checker = linter.register_checker.call_args.args[0]
        assert isinstance(checker, BugmatchChecker)
        assert set(checker.msgs) == {"E9702"}
