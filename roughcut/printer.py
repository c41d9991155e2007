"""Canonical textual rendering of Roughcut values.

`to_s` is display rendering (what `puts` writes): strings appear raw.
`inspect` is diagnostic rendering (REPL echo, `p`, error messages): strings
are quoted. Inside lists every element is rendered with `inspect`.
"""

from __future__ import annotations

import re

from roughcut import LispValue
from roughcut.types.cons import Cons, EmptyListType
from roughcut.types.function import Function
from roughcut.types.symbol import Symbol, Keyword

QUOTE_PREFIXES = {
    "quote": "'",
    "quasiquote": "`",
    "unquote": ",",
    "unquote-splicing": ",@",
}

_REGEX_FLAGS = (("m", re.DOTALL), ("i", re.IGNORECASE), ("x", re.VERBOSE))

_STRING_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def _inspect_string(s: str) -> str:
    return '"' + "".join(_STRING_ESCAPES.get(ch, ch) for ch in s) + '"'


def _regex(pattern: re.Pattern) -> str:
    options = "".join(letter for letter, flag in _REGEX_FLAGS if pattern.flags & flag)
    return f"/{pattern.pattern}/{options}"


def _quote_prefix(cell: Cons) -> str | None:
    head = cell.first
    rest = cell.rest
    if (
        isinstance(head, Symbol)
        and head.name in QUOTE_PREFIXES
        and isinstance(rest, Cons)
        and isinstance(rest.rest, EmptyListType)
    ):
        return QUOTE_PREFIXES[head.name]
    return None


def _list(cell: Cons) -> str:
    prefix = _quote_prefix(cell)
    if prefix is not None:
        return prefix + inspect(cell.rest.first)
    parts = []
    node: LispValue = cell
    while isinstance(node, Cons):
        parts.append(inspect(node.first))
        node = node.rest
    if not isinstance(node, EmptyListType):
        parts.append(".")
        parts.append(inspect(node))
    return "(" + " ".join(parts) + ")"


def inspect(value: LispValue) -> str:
    if value is None:
        return "nil"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return _inspect_string(value)
    if isinstance(value, Cons):
        return _list(value)
    if isinstance(value, EmptyListType):
        return "()"
    if isinstance(value, (Symbol, Keyword)):
        return str(value)
    if isinstance(value, re.Pattern):
        return _regex(value)
    if isinstance(value, Function):
        return str(value)
    name = getattr(value, "lisp_name", None)
    if name is not None:
        return f"#<builtin {name}>"
    return str(value)


def to_s(value: LispValue) -> str:
    if isinstance(value, str):
        return value
    return inspect(value)
