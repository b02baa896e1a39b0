"""Unit tests for PeriodFrom (E9702)."""

import libcst as cst

from bugmatch.domain.descriptions import Severity
from bugmatch.domain.rules import FixPolicy
from bugmatch.domain.rules.period_from import PeriodFrom
from bugmatch.domain.spans import SourceSpan


class TestPeriodFrom:
    """Period.from_ with a Duration (no fix) or a Period (fix to the argument)."""

    def setup_method(self) -> None:
        self.rule = PeriodFrom()

    def _describe(self, parsed, source: str):
        call = parsed.call(source)
        if not self.rule.matches(call, parsed.context):
            return None
        return self.rule.on_match(call, parsed.context)

    def test_duration_argument_is_reported_without_fix(self, temporal_module) -> None:
        """Period.from_(Duration) always raises; a human must rewrite it."""
        description = self._describe(temporal_module, "Period.from_(d)")
        assert description is not None
        assert description.severity is Severity.ERROR
        assert description.fixes == ()
        assert not description.has_fix

    def test_period_argument_is_replaced_by_argument(self, temporal_module) -> None:
        """Period.from_(p) returns p; the fix replaces the whole call with 'p'."""
        description = self._describe(temporal_module, "Period.from_(p)")
        start = temporal_module.text.index("Period.from_(p)")
        [fix] = description.fixes
        [patch] = fix.patches
        assert patch.span == SourceSpan(start, start + len("Period.from_(p)"))
        assert patch.replacement == "p"

    def test_fixed_source_parses(self, temporal_module) -> None:
        description = self._describe(temporal_module, "Period.from_(p)")
        fixed = description.fixes[0].apply(temporal_module.text)
        assert "    b = p\n" in fixed
        cst.parse_module(fixed)

    def test_argument_source_is_copied_verbatim(self, parse) -> None:
        parsed = parse(
            """\
            class Period:
                @staticmethod
                def from_(amount):
                    return amount

            def twice(p: Period):
                return Period.from_( p  )
            """,
            module_name="temporal",
        )
        description = self._describe(parsed, "Period.from_( p  )")
        assert description.fixes[0].patches[0].replacement == "p"

    def test_other_argument_type_is_not_reported(self, temporal_module) -> None:
        assert self._describe(temporal_module, "Period.from_(3)") is None

    def test_call_without_arguments_is_not_reported(self, parse) -> None:
        parsed = parse(
            """\
            class Period:
                @staticmethod
                def from_(amount=None):
                    return amount

            Period.from_()
            """,
            module_name="temporal",
        )
        assert self._describe(parsed, "Period.from_()") is None

    def test_other_static_methods_are_not_matched(self, temporal_module) -> None:
        call = temporal_module.call("Period()")
        assert not self.rule.matches(call, temporal_module.context)

    def test_pattern_metadata(self) -> None:
        assert self.rule.pattern.msgid == "E9702"
        assert self.rule.pattern.symbol == "period-from"
        assert self.rule.pattern.fix_policy is FixPolicy.REQUIRES_HUMAN_ATTENTION
