"""Core evaluator for the Roughcut interpreter.

Evaluation is a direct recursive walk over Cons data. Special forms are
bound in the global environment as SpecialForm objects, but the evaluator
recognises them by the head symbol of a form: only the fixed names (`quote`,
`if`, `send`...) in head position receive unevaluated operands. Macros
expand into a new form that is evaluated again in the caller's environment.

Every form in flight has its (unevaluated) head on `stack`. Heads are popped
when a form returns normally, so after an error the stack holds the path to
the failing form until the top level reports and clears it.
"""

from __future__ import annotations

import logging
from typing import TextIO

from roughcut import SExpression, LispValue
from roughcut.errors import RoughcutStructuralError, RoughcutTypeError
from roughcut.evaluation.host_ops import HostEscape
from roughcut.evaluation.special_forms import SPECIAL_FORMS, SpecialForm
from roughcut.printer import inspect
from roughcut.types.cons import Cons, Empty
from roughcut.types.environment import Environment
from roughcut.types.function import Macro
from roughcut.types.symbol import Symbol, SymbolTable, symbols as default_symbols

logger = logging.getLogger(__name__)


class Evaluator:
    def __init__(
        self,
        symbols: SymbolTable | None = None,
        env: Environment | None = None,
        out: TextIO | None = None,
    ):
        self.symbols = symbols if symbols is not None else default_symbols
        self.env = env if env is not None else Environment()
        self.stack: list[SExpression] = []
        self.host = HostEscape(self.symbols)
        self.special_names = {self.symbols.intern(name): name for name in SPECIAL_FORMS}
        # None writes to whatever sys.stdout is at print time
        self.out = out

    # ------------------------
    # Evaluation
    # ------------------------
    def eval(self, datum: SExpression, env: Environment | None = None) -> LispValue:
        if env is None:
            env = self.env
        if isinstance(datum, Symbol):
            return env.lookup(datum)
        if not isinstance(datum, Cons):
            return datum

        head = datum.first
        operator = self.eval(head, env)
        operands = self._operands(datum)
        self.stack.append(head)
        special = self.special_names.get(head) if isinstance(head, Symbol) else None
        if special is not None:
            result = self._eval_special(special, operator, operands, env)
        else:
            result = self._dispatch(operator, operands, env)
        self.stack.pop()
        return result

    @staticmethod
    def _operands(form: Cons) -> list[SExpression]:
        operands = []
        cell = form.rest
        while isinstance(cell, Cons):
            operands.append(cell.first)
            cell = cell.rest
        if cell is not Empty:
            raise RoughcutStructuralError(f"cannot evaluate dotted form {inspect(form)}")
        return operands

    def _eval_special(
        self, name: str, operator: LispValue, operands: list[SExpression], env: Environment
    ) -> LispValue:
        if not isinstance(operator, SpecialForm):
            raise RoughcutTypeError(f"{name} is bound to {inspect(operator)}, not a special form")
        if name == "if":
            return self._eval_if(operator, operands, env)
        if name == "send":
            return self._eval_send(operator, operands, env)
        return operator(env, *operands)

    def _dispatch(self, operator: LispValue, operands: list[SExpression], env: Environment) -> LispValue:
        if isinstance(operator, Macro):
            expansion = operator(*operands)
            logger.debug("expanded %s into %s", operator.name or "macro", inspect(expansion))
            return self.eval(expansion, env)

        if callable(operator):
            args = [self.eval(operand, env) for operand in operands]
            if isinstance(operator, SpecialForm):
                # special forms are only special under their own names
                raise RoughcutTypeError(f"{operator} cannot be called as an ordinary function")
            return operator(*args)

        raise RoughcutTypeError(f"{inspect(operator)} is not a function")

    def _eval_if(self, form: SpecialForm, operands: list[SExpression], env: Environment) -> LispValue:
        if not 2 <= len(operands) <= 3:
            raise RoughcutStructuralError("if expects (if condition then [else])")
        condition = self.eval(operands[0], env)
        return form(env, condition, *operands[1:])

    def _eval_send(self, form: SpecialForm, operands: list[SExpression], env: Environment) -> LispValue:
        if not operands:
            raise RoughcutStructuralError("send expects (send receiver :operation args...)")
        receiver = self._receiver(operands[0], env)
        args = [self.eval(operand, env) for operand in operands[1:]]
        return form(env, receiver, *args)

    def _receiver(self, expr: SExpression, env: Environment) -> LispValue:
        # an unbound symbol is sent to as itself
        if isinstance(expr, Symbol):
            return env.lookup(expr) if env.contains(expr) else expr
        if isinstance(expr, Cons):
            return self.eval(expr, env)
        return expr

    # ------------------------
    # Helpers used by builtins
    # ------------------------
    def apply(self, fn: LispValue, args: list[LispValue]) -> LispValue:
        """Call `fn` with already-evaluated arguments."""
        if isinstance(fn, (SpecialForm, Macro)) or not callable(fn):
            raise RoughcutTypeError(f"cannot apply {inspect(fn)}")
        return fn(*args)

    def macroexpand_1(self, form: SExpression, env: Environment | None = None) -> SExpression:
        """Expand `form` once if its head names a macro; otherwise return it unchanged."""
        if env is None:
            env = self.env
        if not isinstance(form, Cons) or not isinstance(form.first, Symbol):
            return form
        if not env.contains(form.first):
            return form
        operator = env.lookup(form.first)
        if not isinstance(operator, Macro):
            return form
        return operator(*self._operands(form))

    # ------------------------
    # Diagnostic call stack
    # ------------------------
    def backtrace(self) -> list[str]:
        """Heads of the forms in flight, innermost first."""
        return [f"in '{inspect(head)}'" for head in reversed(self.stack)]

    def clear_stack(self) -> None:
        self.stack.clear()
