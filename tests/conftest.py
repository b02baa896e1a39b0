"""Pytest configuration and shared fixtures.

Run pytest from this project's root; pythonpath in pyproject.toml puts
src/ on the import path.

Example sources are parsed under a chosen module name so that qualified
names line up with the types rules look for (``google.protobuf`` for
protocol buffer enums, ``temporal`` for Period/Duration).
"""

import textwrap
from dataclasses import dataclass

import astroid
import pytest

from bugmatch.domain.context import CheckContext
from bugmatch.domain.spans import SourceBuffer
from bugmatch.infrastructure.gateways.astroid_gateway import AstroidResolver, parse_source

PROTOBUF_SOURCE = """\
class ProtocolMessageEnum:
    def ordinal(self):
        return 0

    def getNumber(self):
        return 0


class Color(ProtocolMessageEnum):
    pass


class Shade(Color):
    pass


class Plain:
    def ordinal(self):
        return 0


def use(color: Color, shade: Shade, plain: Plain):
    first = color.ordinal()
    second = shade.ordinal()
    third = plain.ordinal()
    return first, second, third
"""

TEMPORAL_SOURCE = """\
class Duration:
    pass


class Period:
    @staticmethod
    def from_(amount):
        return Period()

    @classmethod
    def of_days(cls, days: int):
        return cls()

    def normalized(self):
        return self


def convert(d: Duration, p: Period):
    a = Period.from_(d)
    b = Period.from_(p)
    c = Period.from_(3)
    return a, b, c
"""


@dataclass
class ParsedSource:
    """An example module: its text, astroid tree and a CheckContext over it."""

    text: str
    tree: astroid.nodes.Module
    context: CheckContext

    def calls(self) -> list[astroid.nodes.Call]:
        return list(self.tree.nodes_of_class(astroid.nodes.Call))

    def call(self, source: str) -> astroid.nodes.Call:
        """The call whose verbatim source is ``source``."""
        for node in self.calls():
            if self.context.source_for(node) == source:
                return node
        raise LookupError(source)


def build_parsed(source: str, module_name: str = "example", path: str = "example.py") -> ParsedSource:
    text = textwrap.dedent(source)
    tree = parse_source(text, module_name=module_name)
    context = CheckContext(buffer=SourceBuffer(text), resolver=AstroidResolver(), path=path)
    return ParsedSource(text=text, tree=tree, context=context)


@pytest.fixture
def parse():
    """Factory fixture: ``parse(source, module_name=...)`` -> ParsedSource."""
    return build_parsed


@pytest.fixture
def protobuf_module() -> ParsedSource:
    return build_parsed(PROTOBUF_SOURCE, module_name="google.protobuf", path="colors.py")


@pytest.fixture
def temporal_module() -> ParsedSource:
    return build_parsed(TEMPORAL_SOURCE, module_name="temporal", path="periods.py")
