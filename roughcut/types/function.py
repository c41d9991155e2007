"""Closures: user-defined functions and macros."""

from __future__ import annotations

from typing import TYPE_CHECKING

from roughcut import SExpression, LispValue
from roughcut.errors import RoughcutArityError, RoughcutStructuralError
from roughcut.types.cons import Cons, Empty, build, is_list
from roughcut.types.environment import Environment
from roughcut.types.symbol import Symbol

if TYPE_CHECKING:
    from roughcut.evaluation.evaluator import Evaluator


class Function:
    """A closure over its defining environment.

    `params` is a list of Symbols, optionally ending in `& rest-name`. Calling
    the function binds the arguments in a new frame in front of the captured
    environment and evaluates `body` in sequence, returning the last value.
    """

    __slots__ = ("params", "body", "env", "evaluator", "min_args", "max_args", "_fixed", "_rest", "_name")

    anonymous_head = "fn"
    named_head = "defn"

    def __init__(
        self,
        params: SExpression,
        body: list[SExpression],
        env: Environment,
        evaluator: Evaluator,
    ):
        self.params = params
        self.body: tuple[SExpression, ...] = tuple(body)
        self.env = env
        self.evaluator = evaluator
        self._name: Symbol | None = None
        self._fixed, self._rest = self._parse_params(params, evaluator.symbols.intern("&"))
        self.min_args = len(self._fixed)
        self.max_args: int | None = None if self._rest is not None else len(self._fixed)

    @staticmethod
    def _parse_params(params: SExpression, amp: Symbol) -> tuple[list[Symbol], Symbol | None]:
        if not is_list(params) or (isinstance(params, Cons) and not params.is_proper()):
            raise RoughcutStructuralError(f"parameter list must be a list, got {params}")
        names = list(params)
        for name in names:
            if not isinstance(name, Symbol):
                raise RoughcutStructuralError(f"parameter names must be symbols, got {name!s}")
        if amp not in names:
            return names, None
        if names.count(amp) != 1 or names.index(amp) != len(names) - 2:
            raise RoughcutStructuralError(
                "'&' can only be found in the second to last position of an argument list"
            )
        return names[:-2], names[-1]

    @property
    def name(self) -> Symbol | None:
        return self._name

    @name.setter
    def name(self, value: Symbol) -> None:
        # once named, functions cannot be renamed
        if self._name is None:
            self._name = value

    def check_arity(self, count: int) -> None:
        if count < self.min_args:
            expected = f"at least {self.min_args}" if self.max_args is None else str(self.min_args)
        elif self.max_args is not None and count > self.max_args:
            expected = str(self.max_args)
        else:
            return
        label = self._name if self._name is not None else self.anonymous_head
        raise RoughcutArityError(f"wrong number of arguments to {label} (got {count}, expected {expected})")

    def bind(self, args: tuple[LispValue, ...]) -> dict[Symbol, LispValue]:
        bindings = dict(zip(self._fixed, args))
        if self._rest is not None:
            bindings[self._rest] = build(*args[len(self._fixed):])
        return bindings

    def __call__(self, *args: LispValue) -> LispValue:
        self.check_arity(len(args))
        call_env = self.env.extend(self.bind(args))
        result = None
        for expr in self.body:
            result = self.evaluator.eval(expr, call_env)
        return result

    def to_sexp(self) -> SExpression:
        intern = self.evaluator.symbols.intern
        if self._name is None:
            return build(intern(self.anonymous_head), self.params, *self.body)
        return build(intern(self.named_head), self._name, self.params, *self.body)

    def __str__(self) -> str:
        return str(self.to_sexp())

    __repr__ = __str__


class Macro(Function):
    """Same shape as Function; the caller evaluates the returned expansion again."""

    __slots__ = ()

    anonymous_head = "macro"
    named_head = "defmacro"
