import astroid
import pytest

from bugmatch.domain.exceptions import SourceParseError
from bugmatch.domain.rules.period_from import PeriodFrom
from bugmatch.domain.types import MemberKind, TypeRef
from bugmatch.infrastructure.gateways.astroid_gateway import AstroidResolver, parse_source


def test_parse_source_keeps_positions():
    text = "x = 1\nvalue = compute(x)\n"
    module = parse_source(text, module_name="sample")
    call = next(module.nodes_of_class(astroid.nodes.Call))
    assert (call.lineno, call.col_offset) == (2, 8)
    assert module.name == "sample"


def test_parse_source_wraps_syntax_errors():
    with pytest.raises(SourceParseError):
        parse_source("def broken(:\n", module_name="broken")


def test_static_type_from_parameter_annotation(protobuf_module):
    call = protobuf_module.call("color.ordinal()")
    type_ref = AstroidResolver().static_type(call.func.expr)
    assert type_ref == TypeRef("google.protobuf.Color")
    assert isinstance(type_ref.declaration, astroid.nodes.ClassDef)


def test_static_type_from_inferred_instance(parse):
    parsed = parse(
        """\
        class Period:
            pass

        p = Period()
        p.copy()
        """,
        module_name="temporal",
    )
    call = parsed.call("p.copy()")
    assert AstroidResolver().static_type(call.func.expr) == TypeRef("temporal.Period")


def test_static_type_of_class_reference_is_class_object(temporal_module):
    call = temporal_module.call("Period.from_(d)")
    type_ref = AstroidResolver().static_type(call.func.expr)
    assert type_ref.qualified_name == "temporal.Period"
    assert type_ref.is_class_object


def test_static_type_of_unknown_name_is_none(parse):
    parsed = parse("mystery.run()\n")
    assert AstroidResolver().static_type(parsed.calls()[0].func.expr) is None


def test_supertypes_are_transitive(protobuf_module):
    resolver = AstroidResolver()
    shade = resolver.static_type(protobuf_module.call("shade.ordinal()").func.expr)
    names = [t.qualified_name for t in resolver.supertypes(shade)]
    assert names[:2] == ["google.protobuf.Color", "google.protobuf.ProtocolMessageEnum"]
    assert "google.protobuf.Shade" not in names


def test_supertypes_of_unresolvable_type_is_empty():
    assert AstroidResolver().supertypes(TypeRef("nowhere")) == ()


def test_invoked_member_instance_method(protobuf_module):
    member = AstroidResolver().invoked_member(protobuf_module.call("shade.ordinal()"))
    assert member.name == "ordinal"
    assert member.kind is MemberKind.INSTANCE
    assert member.owner.qualified_name == "google.protobuf.ProtocolMessageEnum"


def test_invoked_member_static_and_class_methods(temporal_module):
    resolver = AstroidResolver()
    assert resolver.invoked_member(temporal_module.call("Period.from_(d)")).kind is MemberKind.STATIC
    parsed_call = temporal_module.call("Period.from_(p)")
    assert resolver.invoked_member(parsed_call).qualified_name == "temporal.Period.from_"


def test_invoked_member_parameter_types(parse):
    parsed = parse(
        """\
        class Duration:
            pass

        class Period:
            @staticmethod
            def between(start: Duration, end, *, scale: int = 1):
                return Period()

        Period.between(Duration(), Duration())
        """,
        module_name="temporal",
    )
    member = AstroidResolver().invoked_member(parsed.call("Period.between(Duration(), Duration())"))
    assert member.kind is MemberKind.STATIC
    assert member.parameter_types == ("temporal.Duration", None, "builtins.int")


def test_invoked_member_of_plain_function_is_none(parse):
    parsed = parse("def run():\n    pass\n\nrun()\n")
    resolver = AstroidResolver()
    call = parsed.calls()[0]
    assert resolver.invoked_member(call) is None
    assert resolver.receiver(call) is None


def test_receiver_is_attribute_expression(temporal_module):
    call = temporal_module.call("Period.from_(d)")
    receiver = AstroidResolver().receiver(call)
    assert isinstance(receiver, astroid.nodes.Name)
    assert receiver.name == "Period"


AMBIGUOUS_SOURCE = """\
class Duration:
    pass


class Period:
    @staticmethod
    def from_(amount):
        return amount


def pick(flag):
    either = Duration() if flag else Period()
    same = Duration() if flag else Duration()
    first = Period.from_(either)
    second = Period.from_(same)
    return first, second
"""


def test_static_type_of_disagreeing_inference_is_none(parse):
    parsed = parse(AMBIGUOUS_SOURCE, module_name="temporal")
    resolver = AstroidResolver()
    either = parsed.call("Period.from_(either)").args[0]
    same = parsed.call("Period.from_(same)").args[0]
    assert resolver.static_type(either) is None
    assert resolver.static_type(same) == TypeRef("temporal.Duration")


def test_ambiguous_argument_is_not_reported(parse):
    parsed = parse(AMBIGUOUS_SOURCE, module_name="temporal")
    rule = PeriodFrom()
    either_call = parsed.call("Period.from_(either)")
    same_call = parsed.call("Period.from_(same)")
    assert rule.on_match(either_call, parsed.context) is None
    assert rule.on_match(same_call, parsed.context) is not None
