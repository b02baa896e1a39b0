"""Line-level ``# bugmatch: disable=RuleName`` suppression comments."""

import io
import re
import tokenize

_DIRECTIVE = re.compile(r"#\s*bugmatch\s*:\s*disable\s*=\s*(?P<names>\w+(?:\s*,\s*\w+)*)")
ALL = "all"


class SuppressionIndex:
    """
    Rule names suppressed per line, read from comments once per file.

    A directive suppresses findings that start on the line carrying it.
    ``disable=all`` suppresses every rule on that line.
    """

    __slots__ = ("_by_line",)

    def __init__(self, by_line: dict[int, frozenset[str]] | None = None) -> None:
        self._by_line: dict[int, frozenset[str]] = dict(by_line or {})

    @classmethod
    def from_source(cls, text: str) -> "SuppressionIndex":
        by_line: dict[int, set[str]] = {}
        try:
            for token in tokenize.generate_tokens(io.StringIO(text).readline):
                if token.type != tokenize.COMMENT:
                    continue
                match = _DIRECTIVE.search(token.string)
                if not match:
                    continue
                names = {n.strip() for n in match.group("names").split(",") if n.strip()}
                by_line.setdefault(token.start[0], set()).update(names)
        except (tokenize.TokenError, SyntaxError):
            # Directives past an untokenizable point are ignored.
            pass
        return cls({line: frozenset(names) for line, names in by_line.items()})

    def is_suppressed(self, rule_name: str, lineno: int) -> bool:
        names = self._by_line.get(lineno)
        if not names:
            return False
        return rule_name in names or ALL in names

    def __bool__(self) -> bool:
        return bool(self._by_line)
