"""
  Roughcut Reader: lexer and parser fused into one character-stream consumer.

- Pull-based: each `read` call consumes exactly the characters of one datum
  from a `getc`/`ungetc` source and returns it.
- Emits Roughcut data:

    - nil -> None, true/false -> bool
    - integers -> int, floats -> float
    - symbols -> interned Symbol
    - :name -> Keyword
    - strings -> str
    - /re/opts, %r{re}opts -> compiled re.Pattern
    - lists -> Cons chains ending in Empty (or a dotted tail)
    - 'x `x ~x ~@x (also ,x ,@x) -> (quote x), (quasiquote x), (unquote x), (unquote-splicing x)
"""

from __future__ import annotations

import logging
import re

from roughcut import SExpression
from roughcut.errors import RoughcutReadError, RoughcutEOFError
from roughcut.reader.char_stream import EOF, CharStream, StringCharStream
from roughcut.reader.reader_macros import (
    RETRY,
    WHITESPACE,
    CLOSE,
    ReaderMacros,
    reader_macros,
    is_terminator,
)
from roughcut.types.symbol import SymbolTable, symbols as default_symbols

logger = logging.getLogger(__name__)

DIGITS = frozenset("0123456789")

INTEGER_RE = re.compile(r"[+-]?(0|[1-9][0-9]*)")
FLOAT_RE = re.compile(r"[+-]?(0|[1-9][0-9]*)(\.[0-9]+([eE][+-]?[0-9]+)?|[eE][+-]?[0-9]+)")

CONSTANTS: dict[str, SExpression] = {"nil": None, "true": True, "false": False}


class Reader:
    def __init__(
        self,
        source: CharStream | str,
        symbols: SymbolTable | None = None,
        macros: ReaderMacros | None = None,
    ):
        self.source: CharStream = StringCharStream(source) if isinstance(source, str) else source
        self.symbols = symbols if symbols is not None else default_symbols
        self.macros = macros if macros is not None else reader_macros

    # ------------------------
    # Character level
    # ------------------------
    def getc(self):
        return self.source.getc()

    def ungetc(self, ch) -> None:
        self.source.ungetc(ch)

    def error(self, message: str, eof: bool = False) -> RoughcutReadError:
        """Build (not raise) a read error located at the source's current position."""
        cls = RoughcutEOFError if eof else RoughcutReadError
        position = getattr(self.source, "position", None)
        if position is None:
            return cls(message)
        return cls(message, *position)

    def skip_whitespace(self):
        """Consume whitespace; return the first other character (consumed) or EOF."""
        ch = self.getc()
        while ch is not EOF and ch in WHITESPACE:
            ch = self.getc()
        return ch

    def skip_whitespace_through_newline(self) -> bool:
        """Consume whitespace up to and including a newline.

        Returns True if a newline was consumed before any other character.
        """
        while True:
            ch = self.getc()
            if ch == "\n":
                return True
            if ch is EOF or ch not in WHITESPACE:
                self.ungetc(ch)
                return False

    def read_token(self, prefix: str = "") -> str:
        """Read a maximal run of characters up to whitespace, `)` or EOF."""
        chars = [prefix]
        while True:
            ch = self.getc()
            if is_terminator(ch):
                self.ungetc(ch)
                return "".join(chars)
            chars.append(ch)

    # ------------------------
    # Atoms
    # ------------------------
    def interpret_token(self, token: str) -> SExpression:
        if token in CONSTANTS:
            return CONSTANTS[token]
        return self.symbols.intern(token)

    def read_number(self, token: str) -> int | float:
        if INTEGER_RE.fullmatch(token):
            return int(token)
        if FLOAT_RE.fullmatch(token):
            return float(token)
        raise self.error(f"invalid number: {token}")

    # ------------------------
    # Data
    # ------------------------
    def dispatch(self, ch: str) -> SExpression:
        """Read the datum starting with the already-consumed character `ch`."""
        if ch == ".":
            nxt = self.getc()
            self.ungetc(nxt)
            if is_terminator(nxt):
                raise self.error("`.` outside dotted pair")
            return self.interpret_token(self.read_token(ch))

        if ch in DIGITS:
            return self.read_number(self.read_token(ch))

        if ch in "+-":
            nxt = self.getc()
            self.ungetc(nxt)
            if nxt is not EOF and nxt in DIGITS:
                return self.read_number(self.read_token(ch))
            return self.interpret_token(self.read_token(ch))

        if self.macros.is_macro(ch):
            return self.macros.dispatch(ch, self)

        return self.interpret_token(self.read_token(ch))

    def read(self, should_raise_on_eof: bool = True) -> SExpression:
        """Read one datum.

        At end of input returns EOF, or raises RoughcutEOFError when
        `should_raise_on_eof` is true.
        """
        while True:
            ch = self.skip_whitespace()
            if ch is EOF:
                if should_raise_on_eof:
                    raise self.error("reader reached EOF", eof=True)
                return EOF
            if ch == CLOSE:
                raise self.error("unexpected `)`")
            value = self.dispatch(ch)
            if value is not RETRY:
                return value

    def read_all(self) -> list[SExpression]:
        forms = []
        while (form := self.read(False)) is not EOF:
            forms.append(form)
        logger.debug("read %d forms", len(forms))
        return forms


def read_from_string(text: str, symbols: SymbolTable | None = None) -> SExpression:
    """Read the first datum of `text`."""
    return Reader(text, symbols).read()
