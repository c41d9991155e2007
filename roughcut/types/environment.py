"""Runtime environment for Roughcut.

An Environment is a chain of frames (dicts from Symbol to value), innermost
first. Extending an environment prepends a frame and shares every existing
frame with the parent chain; the global frame is always last.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterable

from roughcut import LispValue
from roughcut.errors import RoughcutNameError
from roughcut.types.symbol import Symbol


class Environment:
    """Chained mapping from Symbols to Lisp values."""

    __slots__ = ("frames",)

    def __init__(self, frames: Iterable[dict[Symbol, LispValue]] | None = None):
        self.frames: list[dict[Symbol, LispValue]] = list(frames) if frames is not None else [{}]
        if not self.frames:
            self.frames.append({})

    @property
    def global_frame(self) -> dict[Symbol, LispValue]:
        return self.frames[-1]

    def _owner(self, name: Symbol) -> dict[Symbol, LispValue] | None:
        for frame in self.frames:
            if name in frame:
                return frame
        return None

    def contains(self, name: Symbol) -> bool:
        return self._owner(name) is not None

    def lookup(self, name: Symbol) -> LispValue:
        """Return the innermost binding of `name`.

        Raises RoughcutNameError if no frame binds it.
        """
        frame = self._owner(name)
        if frame is None:
            raise RoughcutNameError(f"{name} is undefined")
        return frame[name]

    def define(self, name: Symbol, value: LispValue) -> None:
        """Bind `name` in the global frame, whichever frame this call starts from."""
        self.global_frame[name] = value

    def assign(self, name: Symbol, value: LispValue) -> None:
        """Overwrite the nearest existing binding of `name`.

        Raises RoughcutNameError if the symbol is not bound in any frame.
        """
        frame = self._owner(name)
        if frame is None:
            raise RoughcutNameError(f"Undefined variable '{name}'")
        frame[name] = value

    def extend(self, bindings: dict[Symbol, LispValue]) -> Environment:
        """A new environment with `bindings` in front of this chain."""
        return Environment([bindings, *self.frames])

    def update(self, mapping: dict[Symbol, LispValue]) -> None:
        """Bulk-define a mapping of Symbol -> value in the global frame."""
        self.global_frame.update(mapping)

    @staticmethod
    def _write_frame(frame: dict[Symbol, LispValue], buffer: StringIO) -> None:
        buffer.write("{")
        buffer.write(", ".join(str(k) for k in frame))
        buffer.write("}")

    def __str__(self) -> str:
        return f"#<environment depth={len(self.frames)}>"

    def __repr__(self) -> str:
        """Detailed chain representation (names only) for debugging purposes."""
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            for i, frame in enumerate(self.frames):
                if i:
                    buffer.write(" -> ")
                self._write_frame(frame, buffer)
            buffer.write(">")
            return buffer.getvalue()
