"""ProtocolBufferOrdinal (W9701): ``ordinal()`` on a protocol buffer enum."""

import astroid

from bugmatch.domain.context import CheckContext
from bugmatch.domain.descriptions import Description, Severity
from bugmatch.domain.matchers import instance_method
from bugmatch.domain.node_kinds import NodeKind
from bugmatch.domain.rules import BugPattern, FixPolicy, Rule

PROTO_SUPER_CLASS = "google.protobuf.ProtocolMessageEnum"


def _member_dot(text: str, start: int, stop: int) -> int | None:
    """
    Offset of the attribute dot between a receiver and its member name.

    astroid receiver spans leave out enclosing parentheses, so closing
    parentheses, whitespace, line continuations and comments may sit
    between ``start`` and the dot.
    """
    index = start
    while index < stop:
        char = text[index]
        if char == ".":
            return index
        if char == "#":
            newline = text.find("\n", index)
            index = stop if newline < 0 else newline
            continue
        index += 1
    return None


class ProtocolBufferOrdinal(Rule):
    """
    Rule for W9701: flag ``ordinal()`` calls on protocol buffer enum values.

    Auto-fix: rewrites ``value.ordinal()`` to ``value.getNumber()``, replacing
    everything from the attribute dot to the end of the call.
    """

    pattern = BugPattern(
        name="ProtocolBufferOrdinal",
        summary="ordinal() value on Protocol Buffer Enum can change if enumeration order is changed",
        explanation=(
            "Shuffling of values in a Protocol Buffer enum can change the ordinal value of the enum "
            "member. Since changing tag number isn't advisable in protos, use getNumber() "
            "instead which gives the tag number."
        ),
        severity=Severity.WARNING,
        msgid="W9701",
        tags=("protobuf",),
        fix_policy=FixPolicy.AUTOMATIC,
    )
    node_kind = NodeKind.CALL

    def __init__(self, enum_base: str = PROTO_SUPER_CLASS) -> None:
        self.matcher = instance_method().on_descendant_of(enum_base).named("ordinal")

    def on_match(self, node: astroid.nodes.Call, context: CheckContext) -> Description | None:
        receiver = context.receiver(node)
        if receiver is None:
            return None
        receiver_end = context.end_offset(receiver)
        member_end = context.end_offset(node.func)
        call_end = context.end_offset(node)
        if receiver_end is None or member_end is None or call_end is None:
            return None
        dot = _member_dot(context.buffer.text, receiver_end, member_end - len(node.func.attrname))
        if dot is None:
            return self.describe_match(node, context)
        fix = context.fix_builder().replace_range(dot, call_end, ".getNumber()").build()
        return self.describe_match(node, context, fix)
