"""Reader macros: character-triggered sub-readers.

Each macro is a function `(reader, ch) -> value` invoked after the reader has
consumed the trigger character `ch`. A macro that consumes input without
producing a value (a comment) returns `RETRY`.
"""

from __future__ import annotations

import re
from typing import Callable, TYPE_CHECKING

from roughcut import SExpression
from roughcut.errors import RoughcutStructuralError
from roughcut.reader.char_stream import EOF
from roughcut.types.cons import Cons, build
from roughcut.types.symbol import Keyword

if TYPE_CHECKING:
    from roughcut.reader.parser import Reader

ReaderMacro = Callable[["Reader", str], SExpression]

WHITESPACE = frozenset(" \t\r\n\f")
CLOSE = ")"

REGEX_OPTIONS: dict[str, int] = {
    "i": re.IGNORECASE,
    "x": re.VERBOSE,
    "m": re.DOTALL,
}

STRING_ESCAPES: dict[str, str] = {"n": "\n", "t": "\t", "r": "\r"}


class _Retry:
    __slots__ = ()

    def __repr__(self):
        return "RETRY"


RETRY = _Retry()


class ReaderMacros:
    """Registry mapping a leading character to its reader macro."""

    def __init__(self):
        self.macros: dict[str, ReaderMacro] = {}

    def define(self, char: str, fn: ReaderMacro) -> None:
        """Register a reader macro for a given character."""
        self.macros[char] = fn

    def is_macro(self, char: str) -> bool:
        return char in self.macros

    def dispatch(self, char: str, reader: Reader) -> SExpression:
        return self.macros[char](reader, char)


def is_terminator(ch) -> bool:
    return ch is EOF or ch in WHITESPACE or ch == CLOSE


# -------------------------
# Lists and dotted pairs
# -------------------------
def _close_dotted(reader: Reader) -> None:
    while True:
        ch = reader.skip_whitespace()
        if ch is EOF:
            raise reader.error("unterminated list", eof=True)
        if ch == CLOSE:
            return
        if ch == ";":
            read_comment(reader, ch)
            continue
        raise reader.error("more than one object follows `.` in a dotted pair")


def read_list(reader: Reader, _: str) -> SExpression:
    items: list[SExpression] = []
    while True:
        ch = reader.skip_whitespace()
        if ch is EOF:
            raise reader.error("unterminated list", eof=True)
        if ch == CLOSE:
            return build(*items)
        if ch == ".":
            nxt = reader.getc()
            if nxt is EOF:
                raise reader.error("unterminated list", eof=True)
            if nxt in WHITESPACE or nxt == CLOSE:
                if nxt == CLOSE or not items:
                    raise reader.error("`.` outside dotted pair")
                tail = reader.read()
                _close_dotted(reader)
                return build(*items, tail=tail)
            reader.ungetc(nxt)
            items.append(reader.interpret_token(reader.read_token(".")))
            continue
        value = reader.dispatch(ch)
        if value is not RETRY:
            items.append(value)


# -------------------------
# Strings and keywords
# -------------------------
def read_string(reader: Reader, _: str) -> str:
    chars: list[str] = []
    while True:
        ch = reader.getc()
        if ch is EOF:
            raise reader.error("unterminated string", eof=True)
        if ch == '"':
            return "".join(chars)
        if ch == "\\":
            esc = reader.getc()
            if esc is EOF:
                raise reader.error("unterminated string", eof=True)
            chars.append(STRING_ESCAPES.get(esc, esc))
        else:
            chars.append(ch)


def read_keyword(reader: Reader, ch: str) -> SExpression:
    nxt = reader.getc()
    reader.ungetc(nxt)
    if nxt == ":":
        # `::Name` is a qualified identifier, not a keyword
        return reader.interpret_token(reader.read_token(ch))
    name = reader.read_token()
    if not name:
        raise reader.error("empty keyword")
    return Keyword(name)


# -------------------------
# Quote forms: ' ` ~ , ~@ ,@
# -------------------------
def read_quote(reader: Reader, _: str) -> SExpression:
    return build(reader.symbols.intern("quote"), reader.read())


def read_quasiquote(reader: Reader, _: str) -> SExpression:
    value = reader.read()
    if isinstance(value, Cons) and value.first is reader.symbols.intern("unquote-splicing"):
        raise RoughcutStructuralError("unquote-splicing must appear inside a list within quasiquote")
    return build(reader.symbols.intern("quasiquote"), value)


def read_unquote(reader: Reader, _: str) -> SExpression:
    nxt = reader.getc()
    if nxt == "@":
        name = "unquote-splicing"
    else:
        reader.ungetc(nxt)
        name = "unquote"
    return build(reader.symbols.intern(name), reader.read())


def read_comment(reader: Reader, _: str) -> SExpression:
    while True:
        ch = reader.getc()
        if ch is EOF or ch == "\n":
            return RETRY


# -------------------------
# Regular expressions: /.../opts and %r{...}opts
# -------------------------
def _read_delimited(reader: Reader, close: str, open_: str | None = None) -> str:
    chars: list[str] = []
    depth = 0
    while True:
        ch = reader.getc()
        if ch is EOF:
            raise reader.error("unterminated regular expression", eof=True)
        if ch == "\\":
            nxt = reader.getc()
            if nxt is EOF:
                raise reader.error("unterminated regular expression", eof=True)
            chars.append(ch + nxt)
            continue
        if open_ is not None and ch == open_:
            depth += 1
        elif ch == close:
            if depth == 0:
                return "".join(chars)
            depth -= 1
        chars.append(ch)


def _read_options(reader: Reader) -> int:
    flags = 0
    while True:
        ch = reader.getc()
        if is_terminator(ch):
            reader.ungetc(ch)
            return flags
        if ch not in REGEX_OPTIONS:
            raise reader.error(f"unknown regexp option: {ch}")
        flags |= REGEX_OPTIONS[ch]


def _compile(reader: Reader, body: str) -> re.Pattern:
    flags = _read_options(reader)
    try:
        return re.compile(body, flags)
    except (re.error, OverflowError) as exc:
        raise reader.error(f"invalid regexp /{body}/: {exc}") from exc


def read_slash(reader: Reader, ch: str) -> SExpression:
    nxt = reader.getc()
    reader.ungetc(nxt)
    if is_terminator(nxt):
        # division and friends: a lone `/` is a symbol
        return reader.interpret_token(ch)
    return _compile(reader, _read_delimited(reader, "/"))


def read_percent(reader: Reader, ch: str) -> SExpression:
    nxt = reader.getc()
    if nxt != "r":
        reader.ungetc(nxt)
        return reader.interpret_token(reader.read_token(ch))
    brace = reader.getc()
    if brace != "{":
        reader.ungetc(brace)
        return reader.interpret_token(reader.read_token(ch + nxt))
    return _compile(reader, _read_delimited(reader, "}", "{"))


# -------------------------
# Single global instance
# -------------------------
reader_macros: ReaderMacros = ReaderMacros()

reader_macros.define("(", read_list)
reader_macros.define('"', read_string)
reader_macros.define(":", read_keyword)
reader_macros.define("'", read_quote)
reader_macros.define("`", read_quasiquote)
reader_macros.define("~", read_unquote)
reader_macros.define(",", read_unquote)
reader_macros.define(";", read_comment)
reader_macros.define("/", read_slash)
reader_macros.define("%", read_percent)
