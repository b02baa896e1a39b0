"""PeriodFrom (E9702): ``Period.from_`` called with a Duration or a Period."""

import astroid

from bugmatch.domain.context import CheckContext
from bugmatch.domain.descriptions import Description, Severity
from bugmatch.domain.matchers import is_same_type, static_method
from bugmatch.domain.node_kinds import NodeKind
from bugmatch.domain.rules import BugPattern, FixPolicy, Rule

PERIOD_TYPE = "temporal.Period"
DURATION_TYPE = "temporal.Duration"


class PeriodFrom(Rule):
    """
    Rule for E9702.

    ``Period.from_(Duration)`` always raises at runtime: reported without a
    fix, a human has to rewrite it. ``Period.from_(Period)`` returns its
    argument: reported with a fix that replaces the call by the argument.
    """

    pattern = BugPattern(
        name="PeriodFrom",
        summary="Period.from_(Period) returns itself; from_(Duration) raises at runtime.",
        explanation=(
            "Period.from_(amount) will always raise when passed a Duration and return "
            "itself when passed a Period."
        ),
        severity=Severity.ERROR,
        msgid="E9702",
        tags=("time",),
        fix_policy=FixPolicy.REQUIRES_HUMAN_ATTENTION,
    )
    node_kind = NodeKind.CALL

    def __init__(self, period_type: str = PERIOD_TYPE, duration_type: str = DURATION_TYPE) -> None:
        self.matcher = static_method().on_class(period_type).named("from_")
        self._is_duration = is_same_type(duration_type)
        self._is_period = is_same_type(period_type)

    def on_match(self, node: astroid.nodes.Call, context: CheckContext) -> Description | None:
        if not node.args:
            return None
        amount = node.args[0]
        if self._is_duration.matches(amount, context):
            return self.describe_match(node, context)
        if self._is_period.matches(amount, context):
            call_span = context.span_of(node)
            amount_source = context.source_for(amount)
            if call_span is None or amount_source is None:
                return None
            fix = context.fix_builder().replace(call_span, amount_source).build()
            return self.describe_match(node, context, fix)
        return None
