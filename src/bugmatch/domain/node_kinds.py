"""Closed enumeration of syntax-node kinds used to dispatch rules."""

from enum import Enum

import astroid


class NodeKind(Enum):
    """Kind tag for an astroid node. Rules declare one kind; the scanner dispatches on it."""

    MODULE = "Module"
    CLASS_DEF = "ClassDef"
    FUNCTION_DEF = "FunctionDef"
    ASYNC_FUNCTION_DEF = "AsyncFunctionDef"
    LAMBDA = "Lambda"
    ARGUMENTS = "Arguments"
    DECORATORS = "Decorators"
    CALL = "Call"
    KEYWORD = "Keyword"
    STARRED = "Starred"
    ATTRIBUTE = "Attribute"
    NAME = "Name"
    CONST = "Const"
    ASSIGN = "Assign"
    ANN_ASSIGN = "AnnAssign"
    AUG_ASSIGN = "AugAssign"
    ASSIGN_NAME = "AssignName"
    ASSIGN_ATTR = "AssignAttr"
    DEL_NAME = "DelName"
    DEL_ATTR = "DelAttr"
    DELETE = "Delete"
    EXPR = "Expr"
    RETURN = "Return"
    YIELD = "Yield"
    YIELD_FROM = "YieldFrom"
    AWAIT = "Await"
    IF = "If"
    IF_EXP = "IfExp"
    FOR = "For"
    ASYNC_FOR = "AsyncFor"
    WHILE = "While"
    WITH = "With"
    ASYNC_WITH = "AsyncWith"
    TRY = "Try"
    EXCEPT_HANDLER = "ExceptHandler"
    RAISE = "Raise"
    ASSERT = "Assert"
    PASS = "Pass"
    BREAK = "Break"
    CONTINUE = "Continue"
    GLOBAL = "Global"
    NONLOCAL = "Nonlocal"
    IMPORT = "Import"
    IMPORT_FROM = "ImportFrom"
    BIN_OP = "BinOp"
    BOOL_OP = "BoolOp"
    UNARY_OP = "UnaryOp"
    COMPARE = "Compare"
    SUBSCRIPT = "Subscript"
    SLICE = "Slice"
    LIST = "List"
    TUPLE = "Tuple"
    SET = "Set"
    DICT = "Dict"
    LIST_COMP = "ListComp"
    SET_COMP = "SetComp"
    DICT_COMP = "DictComp"
    GENERATOR_EXP = "GeneratorExp"
    COMPREHENSION = "Comprehension"
    JOINED_STR = "JoinedStr"
    FORMATTED_VALUE = "FormattedValue"
    NAMED_EXPR = "NamedExpr"
    MATCH = "Match"
    MATCH_CASE = "MatchCase"
    OTHER = "Other"
    # Parser recovery placeholders; rules never fire on these.
    ERROR = "Error"


_BY_CLASS_NAME: dict[str, NodeKind] = {
    kind.value: kind for kind in NodeKind if kind not in (NodeKind.OTHER, NodeKind.ERROR)
}
_PLACEHOLDER_CLASS_NAMES = frozenset({"Unknown", "EmptyNode"})


def kind_of(node: object) -> NodeKind:
    """Return the kind tag for ``node``; anything that is not a real astroid node is ``ERROR``."""
    if not isinstance(node, astroid.nodes.NodeNG):
        return NodeKind.ERROR
    name = type(node).__name__
    if name in _PLACEHOLDER_CLASS_NAMES:
        return NodeKind.ERROR
    return _BY_CLASS_NAME.get(name, NodeKind.OTHER)
