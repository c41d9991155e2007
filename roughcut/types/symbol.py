from __future__ import annotations


class Symbol:
    """An identifier. Interned symbols are compared by identity."""

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __str__(self):
        return self.name


class Keyword:
    """The `:name` datum. Self-evaluating, equal by name."""

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __eq__(self, other) -> bool:
        return isinstance(other, Keyword) and self.name == other.name

    def __hash__(self) -> int:
        return hash((Keyword, self.name))

    def __repr__(self):
        return f"Keyword({self.name!r})"

    def __str__(self):
        return f":{self.name}"


class SymbolTable:
    """Insert-only registry mapping names to their unique Symbol."""

    __slots__ = ("_symbols",)

    def __init__(self):
        self._symbols: dict[str, Symbol] = {}

    def intern(self, name: str) -> Symbol:
        sym = self._symbols.get(name)
        if sym is None:
            sym = self._symbols[name] = Symbol(name)
        return sym

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)


# Process-wide table shared by the reader and evaluator unless one is passed in.
symbols = SymbolTable()


def intern(name: str) -> Symbol:
    return symbols.intern(name)
