from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from roughcut import LispValue
from roughcut.builtin.env_builtin import register
from roughcut.config import PRIMARY_PROMPT, SECONDARY_PROMPT, RESULT_PREFIX
from roughcut.errors import RoughcutEOFError, RoughcutExit, RoughcutReadError, RoughcutStructuralError
from roughcut.evaluation.evaluator import Evaluator
from roughcut.modules.prelude_loader import load_file, load_prelude
from roughcut.printer import inspect
from roughcut.reader.char_stream import EOF, PromptingCharStream
from roughcut.reader.parser import Reader
from roughcut.types.symbol import SymbolTable, symbols as default_symbols

logger = logging.getLogger(__name__)


class Interpreter:
    """
    A Roughcut session: one symbol table, one global environment and the
    diagnostic call stack, fed either whole strings (`eval`) or an
    interactive character stream (`repl`).

    `prelude=True` loads the bootstrap library from the configured path, a
    path loads that file instead, and None (or False) skips it.
    """

    def __init__(
        self,
        prelude: Path | str | bool | None = True,
        symbols: SymbolTable | None = None,
        out: TextIO | None = None,
    ):
        self.symbols = symbols if symbols is not None else default_symbols
        self.evaluator = Evaluator(self.symbols, out=out)
        self.env = self.evaluator.env
        register(self.evaluator)

        if prelude is True:
            load_prelude(self)
        elif prelude:
            load_prelude(self, prelude)

    def eval_prelude(self, code: str) -> None:
        """Evaluate a string of Lisp code as prelude."""
        for form in Reader(code, self.symbols).read_all():
            self.evaluator.eval(form)

    def eval(self, code: str) -> LispValue:
        """Evaluate every form in `code` and return the value of the last one (nil if none)."""
        reader = Reader(code, self.symbols)
        result = None
        while (form := reader.read(False)) is not EOF:
            # each top-level form starts with an empty call stack
            self.evaluator.clear_stack()
            result = self.evaluator.eval(form)
        return result

    def load(self, path: Path | str) -> None:
        load_file(self.evaluator, path)

    # ------------------------
    # Top-level loop
    # ------------------------
    def report(self, exc: BaseException, err: TextIO) -> None:
        """Write an error and the forms in flight, then forget them."""
        err.write(f"{type(exc).__name__}: {exc}\n")
        for line in self.evaluator.backtrace():
            err.write(f"\t{line}\n")
        err.flush()
        self.evaluator.clear_stack()

    def repl(
        self,
        io: TextIO | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
        prompt: bool = True,
    ) -> int:
        """Read, evaluate and echo forms until end of input or `(exit)`.

        A failing form is reported on `err` and the loop carries on with the
        next one; only input ending inside an unfinished form ends the session.
        Returns the status given to `(exit)`, else 0.
        """
        out = out if out is not None else sys.stdout
        err = err if err is not None else sys.stderr
        stream = PromptingCharStream(
            PRIMARY_PROMPT if prompt else "",
            SECONDARY_PROMPT if prompt else "",
            io=io,
            out=out,
        )
        reader = Reader(stream, self.symbols)
        underscore = self.symbols.intern("_")

        status = 0
        while True:
            reading = False
            try:
                if not reader.skip_whitespace_through_newline():
                    reading = True
                    form = reader.read(False)
                    reading = False
                    if form is EOF:
                        if prompt:
                            out.write("\n")
                        break
                    value = self.evaluator.eval(form)
                    self.env.define(underscore, value)
                    out.write(f"{RESULT_PREFIX if prompt else ''}{inspect(value)}\n")
                    out.flush()
            except RoughcutExit as exc:
                self.evaluator.clear_stack()
                status = exc.status
                break
            except RoughcutEOFError as exc:
                self.report(exc, err)
                break
            except (RoughcutReadError, RoughcutStructuralError) as exc:
                self.report(exc, err)
                if reading:
                    # drop the rest of the offending line
                    while not stream.at_line_start:
                        stream.getc()
            except Exception as exc:
                logger.debug("top-level form failed", exc_info=exc)
                self.report(exc, err)

            if stream.at_line_start:
                stream.reset_prompt()
        return status
