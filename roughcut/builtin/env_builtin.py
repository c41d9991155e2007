"""Built-in functions for the Roughcut runtime environment.

Special forms, printing, list construction, application helpers and the
session escape (`exit`) are bound here; everything else lives in the
bootstrap library and reaches the host through `send`.
"""

from __future__ import annotations

import itertools
from typing import Callable

from roughcut import LispValue
from roughcut.errors import RoughcutArityError, RoughcutExit, RoughcutTypeError
from roughcut.evaluation.special_forms import SPECIAL_FORMS, SpecialForm
from roughcut.modules.prelude_loader import load_file
from roughcut.printer import inspect, to_s
from roughcut.types.cons import Cons, Empty, build, concat, is_list
from roughcut.types.symbol import Symbol

BuiltinFn = Callable[..., LispValue]


class Builtin:
    """A host function bound in the global environment.

    The wrapped function receives the evaluator followed by the already
    evaluated arguments.
    """

    __slots__ = ("lisp_name", "fn", "min_args", "max_args", "evaluator")

    def __init__(self, lisp_name: str, fn: BuiltinFn, min_args: int, max_args: int | None, evaluator=None):
        self.lisp_name = lisp_name
        self.fn = fn
        self.min_args = min_args
        self.max_args = max_args
        self.evaluator = evaluator

    def __call__(self, *args: LispValue) -> LispValue:
        count = len(args)
        if count < self.min_args or (self.max_args is not None and count > self.max_args):
            if self.max_args is None:
                expected = f"at least {self.min_args}"
            elif self.min_args == self.max_args:
                expected = str(self.min_args)
            else:
                expected = f"{self.min_args}..{self.max_args}"
            raise RoughcutArityError(
                f"wrong number of arguments to {self.lisp_name} (got {count}, expected {expected})"
            )
        return self.fn(self.evaluator, *args)

    def __str__(self):
        return f"#<builtin {self.lisp_name}>"

    __repr__ = __str__


BUILTINS: dict[str, tuple[BuiltinFn, int, int | None]] = {}


def builtin(name: str, min_args: int = 0, max_args: int | None = None):
    def decorator(fn: BuiltinFn) -> BuiltinFn:
        BUILTINS[name] = (fn, min_args, max_args)
        return fn

    return decorator


# -------------------------------
# Printing
# -------------------------------
@builtin("p")
def p(evaluator, *args: LispValue) -> LispValue:
    """Print the inspect form of each argument on its own line; return the argument(s)."""
    for arg in args:
        print(inspect(arg), file=evaluator.out)
    if len(args) == 1:
        return args[0]
    return build(*args)


@builtin("puts")
def puts(evaluator, *args: LispValue) -> None:
    print(" ".join(to_s(arg) for arg in args), file=evaluator.out)
    return None


# -------------------------------
# Application and evaluation
# -------------------------------
@builtin("apply", 2)
def apply(evaluator, fn: LispValue, *args: LispValue) -> LispValue:
    """(apply f a b '(c d)) calls f with a b c d."""
    *leading, last = args
    if not is_list(last):
        raise RoughcutTypeError(f"last argument to apply must be a list, got {inspect(last)}")
    return evaluator.apply(fn, [*leading, *last])


@builtin("macroexpand-1", 1, 1)
def macroexpand_1(evaluator, form: LispValue) -> LispValue:
    return evaluator.macroexpand_1(form)


@builtin("eval", 1, 1)
def eval_builtin(evaluator, datum: LispValue) -> LispValue:
    """Evaluate a datum in the global environment."""
    return evaluator.eval(datum)


@builtin("load", 1, 1)
def load(evaluator, path: LispValue) -> bool:
    if not isinstance(path, str):
        raise RoughcutTypeError(f"load expects a file name string, got {inspect(path)}")
    load_file(evaluator, path)
    return True


# -------------------------------
# Lists and symbols
# -------------------------------
@builtin("list")
def list_builtin(evaluator, *args: LispValue) -> LispValue:
    return build(*args)


@builtin("cons", 2, 2)
def cons(evaluator, first: LispValue, rest: LispValue) -> Cons:
    return Cons(first, rest)


@builtin("concat")
def concat_builtin(evaluator, *lists: LispValue) -> LispValue:
    for lst in lists:
        if not is_list(lst):
            raise RoughcutTypeError(f"concat expects lists, got {inspect(lst)}")
    result: LispValue = Empty
    for lst in reversed(lists):
        result = concat(lst, result)
    return result


_gensym_counter = itertools.count(1)


@builtin("gensym", 0, 1)
def gensym(evaluator, prefix: LispValue = "G__") -> Symbol:
    """A fresh uninterned symbol, distinct from every symbol the reader returns."""
    return Symbol(f"{to_s(prefix)}{next(_gensym_counter)}")


@builtin("exit", 0, 1)
def exit_builtin(evaluator, status: LispValue = 0) -> LispValue:
    raise RoughcutExit(status if isinstance(status, int) else 0)


def register(evaluator) -> None:
    """Register special forms, builtin functions and constants into the evaluator's global environment."""
    intern = evaluator.symbols.intern
    env = evaluator.env
    env.update({intern(name): SpecialForm(name, handler, evaluator) for name, handler in SPECIAL_FORMS.items()})
    env.update(
        {
            intern(name): Builtin(name, fn, min_args, max_args, evaluator)
            for name, (fn, min_args, max_args) in BUILTINS.items()
        }
    )
    env.define(intern("env"), env)
    env.define(intern("_"), None)
