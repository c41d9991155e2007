from __future__ import annotations

"""
Indexer for Roughcut files that reads, but never evaluates, a document.

The document goes through the interpreter's own Reader so diagnostics match
what the REPL would report. Top-level forms are scanned for:
- definitions: (def name ...), (defn name ...), (defmacro name ...)
- the first reader error, with its position

Reading stops at the first error: everything before it is still indexed.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from roughcut.errors import RoughcutError, RoughcutReadError
from roughcut.printer import inspect
from roughcut.reader.char_stream import EOF, StringCharStream
from roughcut.reader.parser import Reader
from roughcut.reader.reader_macros import RETRY
from roughcut.types.cons import Cons, is_list
from roughcut.types.symbol import Symbol, SymbolTable

DEFINITION_KINDS = {"def": "var", "defn": "function", "defmacro": "macro"}
# (def name (fn ...)) is indexed as a function, (def name (macro ...)) as a macro
VALUE_KINDS = {"fn": "function", "macro": "macro"}


@dataclass
class SymbolDef:
    name: str
    kind: str  # "var" | "function" | "macro"
    line: int
    col: int
    params: Optional[str] = None

    @property
    def signature(self) -> Optional[str]:
        if self.params is None:
            return None
        inner = self.params[1:-1]
        return f"({self.name} {inner})" if inner else f"({self.name})"


@dataclass
class ReadErrorInfo:
    message: str
    line: int
    col: int


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    forms: int = 0
    error: Optional[ReadErrorInfo] = None


class _IndexingReader(Reader):
    """Reader that remembers the start offset of every datum, in reading order."""

    def __init__(self, text: str, symbols: SymbolTable):
        super().__init__(StringCharStream(text), symbols)
        self.starts: List[int] = []

    def dispatch(self, ch: str):
        self.starts.append(self.source.pos - 1)
        slot = len(self.starts) - 1
        value = super().dispatch(ch)
        if value is RETRY:
            # comments are not data
            del self.starts[slot]
        return value


def _position_from_offset(text: str, offset: int) -> Tuple[int, int]:
    # Return (line, col), 0-based
    line = text.count("\n", 0, offset)
    last_nl = text.rfind("\n", 0, offset)
    col = offset if last_nl == -1 else offset - last_nl - 1
    return line, col


def _definition(form: Cons) -> Optional[Tuple[str, str, Optional[str]]]:
    """(name, kind, params) for a definition form, else None."""
    head = form.first
    if not isinstance(head, Symbol) or head.name not in DEFINITION_KINDS:
        return None
    operands = list(form) if form.is_proper() else []
    if len(operands) < 2 or not isinstance(operands[1], Symbol):
        return None
    kind = DEFINITION_KINDS[head.name]
    params = None
    if kind != "var" and len(operands) >= 3 and is_list(operands[2]):
        params = inspect(operands[2])
    elif kind == "var" and len(operands) >= 3 and isinstance(operands[2], Cons):
        value = operands[2]
        value_head = value.first
        if isinstance(value_head, Symbol) and value_head.name in VALUE_KINDS:
            kind = VALUE_KINDS[value_head.name]
            if isinstance(value.rest, Cons) and is_list(value.rest.first):
                params = inspect(value.rest.first)
    return operands[1].name, kind, params


def build_index(text: str, symbols: SymbolTable | None = None) -> DocumentIndex:
    idx = DocumentIndex()
    reader = _IndexingReader(text, symbols if symbols is not None else SymbolTable())

    while True:
        first_datum = len(reader.starts)
        try:
            form = reader.read(False)
        except RoughcutReadError as exc:
            if exc.line is not None:
                line, col = exc.line - 1, exc.column - 1
            else:
                line, col = _position_from_offset(text, reader.source.pos)
            idx.error = ReadErrorInfo(message=exc.reason, line=line, col=col)
            break
        except RoughcutError as exc:
            line, col = _position_from_offset(text, reader.source.pos)
            idx.error = ReadErrorInfo(message=str(exc), line=line, col=col)
            break
        if form is EOF:
            break
        idx.forms += 1

        if not isinstance(form, Cons):
            continue
        found = _definition(form)
        if found is None:
            continue
        name, kind, params = found
        # pre-order: the form, its head, then the defined name
        line, col = _position_from_offset(text, reader.starts[first_datum + 2])
        idx.symbols[name] = SymbolDef(name=name, kind=kind, line=line, col=col, params=params)

    return idx


# Builtin signatures for quick hover/signature help without eval
BUILTIN_SIGNATURES: Dict[str, str] = {
    # special forms
    "quote": "(quote datum)",
    "quasiquote": "(quasiquote template)",
    "def": "(def name value)",
    "set!": "(set! name value)",
    "fn": "(fn (params & rest) body...)",
    "macro": "(macro (params & rest) body...)",
    "if": "(if condition then else?)",
    "send": "(send receiver :operation args...)",
    # builtins
    "p": "(p & values)",
    "puts": "(puts & values)",
    "apply": "(apply f & args list)",
    "macroexpand-1": "(macroexpand-1 form)",
    "load": "(load filename)",
    "eval": "(eval datum)",
    "list": "(list & values)",
    "cons": "(cons x xs)",
    "concat": "(concat & lists)",
    "gensym": "(gensym prefix?)",
    "exit": "(exit status?)",
    # bootstrap library
    "defmacro": "(defmacro name (params) body...)",
    "defn": "(defn name (params) body...)",
    "first": "(first xs)",
    "rest": "(rest xs)",
    "second": "(second xs)",
    "empty?": "(empty? xs)",
    "nil?": "(nil? x)",
    "not": "(not x)",
    "when": "(when test body...)",
    "unless": "(unless test body...)",
    "do": "(do body...)",
    "let": "(let ((name value) ...) body...)",
    "and": "(and & values)",
    "or": "(or & values)",
    "cond": "(cond test expr ...)",
    "+": "(+ & nums)",
    "-": "(- x & nums)",
    "*": "(* & nums)",
    "/": "(/ x & nums)",
    "=": "(= a b)",
    "<": "(< a b)",
    ">": "(> a b)",
    "<=": "(<= a b)",
    ">=": "(>= a b)",
    "map": "(map f xs)",
    "reduce": "(reduce f acc xs)",
    "filter": "(filter pred xs)",
    "length": "(length xs)",
    "inc": "(inc x)",
    "dec": "(dec x)",
    "str": "(str & values)",
}
