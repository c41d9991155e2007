"""Cons cells and the EmptyList terminator.

Lists are persistent chains of Cons cells ending in `Empty`. A chain may end in
any other value instead (a dotted pair); that value is only ever the final `rest`.
Both classes refuse attribute assignment once constructed.
"""

from __future__ import annotations

from typing import Iterator

from roughcut import LispValue


class EmptyListType:
    """The unique empty list `()`. Distinct from nil and false."""

    __slots__ = ()
    _instance: EmptyListType | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def first(self) -> LispValue:
        return None

    @property
    def rest(self) -> EmptyListType:
        return self

    def __setattr__(self, name, value):
        raise AttributeError("the empty list is immutable")

    def __iter__(self) -> Iterator[LispValue]:
        return iter(())

    def __len__(self) -> int:
        return 0

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (EmptyListType, ())

    def __repr__(self) -> str:
        return "()"

    __str__ = __repr__


Empty = EmptyListType()


class Cons:
    """A pair of `first` and `rest`."""

    __slots__ = ("first", "rest")

    def __init__(self, first: LispValue, rest: LispValue = Empty):
        object.__setattr__(self, "first", first)
        object.__setattr__(self, "rest", rest)

    def __setattr__(self, name, value):
        raise AttributeError("cons cells are immutable")

    def __iter__(self) -> Iterator[LispValue]:
        # Yields the elements of the proper part; a dotted tail is not an element.
        cell: LispValue = self
        while isinstance(cell, Cons):
            yield cell.first
            cell = cell.rest

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return True

    def __eq__(self, other) -> bool:
        a: LispValue = self
        b: LispValue = other
        while isinstance(a, Cons) and isinstance(b, Cons):
            if a is b:
                return True
            if not lisp_equal(a.first, b.first):
                return False
            a, b = a.rest, b.rest
        if isinstance(a, Cons) or isinstance(b, Cons):
            return False
        return lisp_equal(a, b)

    __hash__ = None

    @property
    def tail(self) -> LispValue:
        """The value ending the chain: Empty for proper lists, else the dotted tail."""
        cell: LispValue = self
        while isinstance(cell, Cons):
            cell = cell.rest
        return cell

    def is_proper(self) -> bool:
        return self.tail is Empty

    def __str__(self) -> str:
        from roughcut.printer import inspect
        return inspect(self)

    __repr__ = __str__


def lisp_equal(a: LispValue, b: LispValue) -> bool:
    """Structural equality in which true and false never equal a number."""
    if isinstance(a, bool) or isinstance(b, bool):
        return a is b
    return a == b


def is_list(value: LispValue) -> bool:
    return isinstance(value, (Cons, EmptyListType))


def build(*values: LispValue, tail: LispValue = Empty) -> Cons | EmptyListType:
    """Build a list of `values`; `tail` ends the chain (a dotted pair when not a list)."""
    result = tail
    for value in reversed(values):
        result = Cons(value, result)
    return result


def concat(a: LispValue, b: LispValue) -> LispValue:
    """Elements of `a` followed by `b`; `b` itself becomes the tail."""
    return build(*a, tail=b)


def reverse(lst: LispValue) -> Cons | EmptyListType:
    result: LispValue = Empty
    for value in lst:
        result = Cons(value, result)
    return result
