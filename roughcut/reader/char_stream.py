"""Pushback-capable character sources for the reader.

A source exposes `getc()` (the next character, or `EOF`) and `ungetc(ch)`
(push back the character just read). The reader never pushes back more than
one character, and never one it did not just read.
"""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class _EOFType:
    __slots__ = ()

    def __repr__(self):
        return "EOF"

    def __bool__(self):
        return False


EOF = _EOFType()


class CharStream(Protocol):
    def getc(self) -> str | _EOFType: ...

    def ungetc(self, ch: str | _EOFType) -> None: ...


class StringCharStream:
    """Characters of an in-memory string, with line/column tracking for errors."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def getc(self) -> str | _EOFType:
        if self.pos >= len(self.text):
            return EOF
        ch = self.text[self.pos]
        self.pos += 1
        return ch

    def ungetc(self, ch: str | _EOFType) -> None:
        if ch is EOF:
            return
        if self.pos == 0 or self.text[self.pos - 1] != ch:
            raise ValueError(f"cannot push back {ch!r}: it was not the last character read")
        self.pos -= 1

    @property
    def position(self) -> tuple[int, int]:
        """1-based (line, column) of the next character."""
        line = self.text.count("\n", 0, self.pos) + 1
        column = self.pos - (self.text.rfind("\n", 0, self.pos) + 1) + 1
        return line, column


class PromptingCharStream:
    """Line-at-a-time characters from a text file, writing a prompt before each line.

    The primary prompt is written before the first line of a form; later lines
    get the secondary prompt until `reset_prompt` is called.
    """

    def __init__(
        self,
        prompt: str = "",
        secondary_prompt: str = "",
        io: TextIO | None = None,
        out: TextIO | None = None,
    ):
        self.primary_prompt = prompt
        self.secondary_prompt = secondary_prompt
        self.io = io if io is not None else sys.stdin
        self.out = out if out is not None else sys.stdout
        self._prompt = prompt
        self._line = ""
        self._index = 0
        self._line_number = 0

    def getc(self) -> str | _EOFType:
        if self._index >= len(self._line):
            if self._prompt:
                self.out.write(self._prompt)
                self.out.flush()
            self._prompt = self.secondary_prompt
            self._line = self.io.readline()
            self._index = 0
            if not self._line:
                return EOF
            self._line_number += 1
        ch = self._line[self._index]
        self._index += 1
        return ch

    def ungetc(self, ch: str | _EOFType) -> None:
        if ch is EOF:
            return
        if self._index == 0 or self._line[self._index - 1] != ch:
            raise ValueError(f"cannot push back {ch!r}: it was not the last character read")
        self._index -= 1

    @property
    def at_line_start(self) -> bool:
        return self._index >= len(self._line)

    @property
    def position(self) -> tuple[int, int]:
        return self._line_number, self._index + 1

    def reset_prompt(self) -> None:
        self._prompt = self.primary_prompt
