from roughcut import SExpression, LispValue
from roughcut.errors import RoughcutStructuralError
from roughcut.types.environment import Environment
from roughcut.types.function import Function, Macro


def _closure(cls: type[Function], label: str, evaluator, env: Environment, operands) -> Function:
    # (fn (params) body...) requires at least one body form; the body is an implicit sequence.
    if not operands:
        raise RoughcutStructuralError(f"{label} requires a parameter list")
    params, *body = operands
    if not body:
        raise RoughcutStructuralError(f"{label} requires at least one body expression")
    return cls(params, body, env, evaluator)


def fn_form(evaluator, env: Environment, *operands: SExpression) -> LispValue:
    return _closure(Function, "fn", evaluator, env, operands)


def macro_form(evaluator, env: Environment, *operands: SExpression) -> LispValue:
    return _closure(Macro, "macro", evaluator, env, operands)
