from __future__ import annotations

from roughcut import SExpression, LispValue
from roughcut.errors import RoughcutStructuralError, RoughcutTypeError
from roughcut.types.cons import Cons, Empty, build, is_list
from roughcut.types.environment import Environment


class _Splice:
    """Result of an element-position (unquote-splicing x): items to splice into the parent."""

    __slots__ = ("items",)

    def __init__(self, items: SExpression):
        self.items = items


def _operand(template: Cons, name: str) -> SExpression:
    rest = template.rest
    if not isinstance(rest, Cons) or rest.rest is not Empty:
        raise RoughcutStructuralError(f"{name} expects only one operand")
    return rest.first


def _expand(evaluator, template: SExpression, env: Environment, top: bool) -> LispValue:
    if not isinstance(template, Cons):
        return template

    head = template.first
    intern = evaluator.symbols.intern
    if head is intern("unquote"):
        return evaluator.eval(_operand(template, "unquote"), env)
    if head is intern("unquote-splicing"):
        if top:
            raise RoughcutStructuralError("unquote-splicing must appear inside a list within quasiquote")
        value = evaluator.eval(_operand(template, "unquote-splicing"), env)
        if not is_list(value):
            raise RoughcutTypeError("unquote-splicing must be used with a list")
        return _Splice(value)

    items: list[LispValue] = []
    cell: SExpression = template
    while isinstance(cell, Cons):
        expanded = _expand(evaluator, cell.first, env, False)
        if isinstance(expanded, _Splice):
            items.extend(expanded.items)
        else:
            items.append(expanded)
        cell = cell.rest
    # dotted tails are atoms: kept as-is, never spliced
    return build(*items, tail=cell)


def expand_quasiquote(evaluator, template: SExpression, env: Environment) -> LispValue:
    """Build the data described by `template`, evaluating its unquoted parts in `env`."""
    return _expand(evaluator, template, env, True)


def quote_form(evaluator, env: Environment, *operands: SExpression) -> LispValue:
    if len(operands) != 1:
        raise RoughcutStructuralError("quote expects exactly 1 operand")
    return operands[0]


def quasiquote_form(evaluator, env: Environment, *operands: SExpression) -> LispValue:
    if len(operands) != 1:
        raise RoughcutStructuralError("quasiquote expects exactly 1 operand")
    return expand_quasiquote(evaluator, operands[0], env)
