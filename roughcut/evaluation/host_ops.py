"""Host escape: the fixed allow-list of operations reachable through `send`.

`(send receiver :op args...)` looks `op` up by the receiver's kind (integer,
string, list, ...) and then under "any". Nothing outside this table can be
reached from Lisp code: there is no dispatch by attribute name.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable

from roughcut import LispValue
from roughcut.errors import RoughcutError, RoughcutHostEscapeError
from roughcut.printer import inspect, to_s
from roughcut.types.cons import Cons, EmptyListType, build, concat, lisp_equal, reverse
from roughcut.types.function import Function, Macro
from roughcut.types.symbol import Symbol, Keyword, SymbolTable

logger = logging.getLogger(__name__)

HostOp = Callable[..., LispValue]

NUMBER_KINDS = ("integer", "float")


def kind_of(value: LispValue) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (Cons, EmptyListType)):
        return "list"
    if isinstance(value, Symbol):
        return "symbol"
    if isinstance(value, Keyword):
        return "keyword"
    if isinstance(value, re.Pattern):
        return "regexp"
    if isinstance(value, Macro):
        return "macro"
    if isinstance(value, Function):
        return "function"
    return "object"


class HostOperations:
    """Registry of (kind, operation name) -> implementation."""

    def __init__(self):
        self.ops: dict[tuple[str, str], HostOp] = {}

    def register(self, name: str, *kinds: str) -> Callable[[HostOp], HostOp]:
        kinds = kinds or ("any",)

        def decorator(fn: HostOp) -> HostOp:
            for kind in kinds:
                self.ops[(kind, name)] = fn
            return fn

        return decorator

    def find(self, kind: str, name: str) -> HostOp | None:
        return self.ops.get((kind, name)) or self.ops.get(("any", name))


def operation_name(operation: LispValue) -> str:
    if isinstance(operation, (Keyword, Symbol)):
        return operation.name
    if isinstance(operation, str):
        return operation
    raise RoughcutHostEscapeError(f"operation name must be a keyword, got {inspect(operation)}")


class HostEscape:
    def __init__(self, symbols: SymbolTable, operations: HostOperations | None = None):
        self.symbols = symbols
        self.operations = operations if operations is not None else host_operations

    def invoke(self, receiver: LispValue, operation: LispValue, args: tuple[LispValue, ...]) -> LispValue:
        name = operation_name(operation)
        kind = kind_of(receiver)
        fn = self.operations.find(kind, name)
        if fn is None:
            raise RoughcutHostEscapeError(f"undefined operation '{name}' for {inspect(receiver)}:{kind}")
        logger.debug("send %s to %s", name, kind)
        try:
            return fn(self, receiver, *args)
        except RoughcutError:
            raise
        except Exception as exc:
            raise RoughcutHostEscapeError(f"{name} failed on {inspect(receiver)}: {exc}") from exc


host_operations = HostOperations()
op = host_operations.register


# -------------------------------
# Any receiver
# -------------------------------
@op("==")
def _equal(host, a, b):
    return lisp_equal(a, b)


@op("!=")
def _not_equal(host, a, b):
    return not lisp_equal(a, b)


@op("equal?")
def _identical(host, a, b):
    return a is b


@op("nil?")
def _is_nil(host, a):
    return a is None


@op("to_s")
def _to_s(host, a):
    return to_s(a)


@op("inspect")
def _inspect(host, a):
    return inspect(a)


@op("class")
def _class(host, a):
    return kind_of(a)


# -------------------------------
# Numbers
# -------------------------------
@op("+", *NUMBER_KINDS)
def _add(host, a, b):
    return a + b


@op("-", *NUMBER_KINDS)
def _sub(host, a, b):
    return a - b


@op("*", *NUMBER_KINDS)
def _mul(host, a, b):
    return a * b


@op("/", *NUMBER_KINDS)
def _div(host, a, b):
    # integer division floors
    if isinstance(a, int) and isinstance(b, int):
        return a // b
    return a / b


@op("%", *NUMBER_KINDS)
def _mod(host, a, b):
    return a % b


@op("**", *NUMBER_KINDS)
def _pow(host, a, b):
    return a ** b


@op("<", *NUMBER_KINDS, "string")
def _lt(host, a, b):
    return a < b


@op(">", *NUMBER_KINDS, "string")
def _gt(host, a, b):
    return a > b


@op("<=", *NUMBER_KINDS, "string")
def _lte(host, a, b):
    return a <= b


@op(">=", *NUMBER_KINDS, "string")
def _gte(host, a, b):
    return a >= b


@op("-@", *NUMBER_KINDS)
def _neg(host, a):
    return -a


@op("abs", *NUMBER_KINDS)
def _abs(host, a):
    return abs(a)


@op("floor", *NUMBER_KINDS)
def _floor(host, a):
    return math.floor(a)


@op("ceil", *NUMBER_KINDS)
def _ceil(host, a):
    return math.ceil(a)


@op("round", *NUMBER_KINDS)
def _round(host, a, digits=None):
    return round(a) if digits is None else round(a, digits)


@op("to_i", *NUMBER_KINDS, "string")
def _to_i(host, a):
    return int(a)


@op("to_f", *NUMBER_KINDS, "string")
def _to_f(host, a):
    return float(a)


@op("zero?", *NUMBER_KINDS)
def _is_zero(host, a):
    return a == 0


# -------------------------------
# Strings
# -------------------------------
@op("+", "string")
def _str_concat(host, s, other):
    return s + other


@op("*", "string")
def _str_repeat(host, s, n):
    return s * n


@op("length", "string")
def _str_length(host, s):
    return len(s)


@op("upcase", "string")
def _upcase(host, s):
    return s.upper()


@op("downcase", "string")
def _downcase(host, s):
    return s.lower()


@op("strip", "string")
def _strip(host, s):
    return s.strip()


@op("split", "string")
def _split(host, s, sep=None):
    if isinstance(sep, re.Pattern):
        return build(*sep.split(s))
    return build(*s.split(sep))


@op("include?", "string")
def _str_include(host, s, part):
    return part in s


@op("start_with?", "string")
def _start_with(host, s, prefix):
    return s.startswith(prefix)


@op("end_with?", "string")
def _end_with(host, s, suffix):
    return s.endswith(suffix)


@op("empty?", "string")
def _str_empty(host, s):
    return not s


@op("to_sym", "string")
def _to_sym(host, s):
    return host.symbols.intern(s)


@op("[]", "string")
def _str_index(host, s, i):
    return s[i] if -len(s) <= i < len(s) else None


@op("=~", "string")
def _str_match(host, s, pattern):
    m = pattern.search(s)
    return m.start() if m else None


# -------------------------------
# Lists
# -------------------------------
@op("first", "list")
def _first(host, lst):
    return lst.first


@op("rest", "list")
def _rest(host, lst):
    return lst.rest


@op("cons", "list")
def _cons(host, lst, value):
    return Cons(value, lst)


@op("concat", "list")
@op("+", "list")
def _concat(host, lst, other):
    return concat(lst, other)


@op("length", "list")
def _list_length(host, lst):
    return len(lst)


@op("empty?", "list")
def _list_empty(host, lst):
    return isinstance(lst, EmptyListType)


@op("nth", "list")
def _nth(host, lst, i):
    if isinstance(i, bool) or not isinstance(i, int):
        raise RoughcutHostEscapeError(f"nth expects an integer index, got {inspect(i)}")
    for index, value in enumerate(lst):
        if index == i:
            return value
    return None


@op("reverse", "list")
def _reverse(host, lst):
    return reverse(lst)


@op("include?", "list")
def _list_include(host, lst, value):
    return any(lisp_equal(item, value) for item in lst)


# -------------------------------
# Symbols, keywords, regexps, functions
# -------------------------------
@op("name", "symbol", "keyword")
def _name(host, sym):
    return sym.name


@op("match", "regexp")
def _re_match(host, pattern, s):
    m = pattern.search(s)
    return m.group(0) if m else None


@op("=~", "regexp")
def _re_index(host, pattern, s):
    m = pattern.search(s)
    return m.start() if m else None


@op("source", "regexp")
def _re_source(host, pattern):
    return pattern.pattern


@op("name", "function", "macro")
def _fn_name(host, fn):
    return fn.name


@op("arity", "function", "macro")
def _fn_arity(host, fn):
    # variadic arity is reported as -(required + 1)
    return fn.min_args if fn.max_args is not None else -(fn.min_args + 1)
