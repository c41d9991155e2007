from roughcut import SExpression, LispValue
from roughcut.errors import RoughcutStructuralError
from roughcut.types.environment import Environment
from roughcut.types.function import Function
from roughcut.types.symbol import Symbol


def define_form(evaluator, env: Environment, *operands: SExpression) -> LispValue:
    """
    (def name value)
    Evaluates `value` in the current environment and binds it in the global frame.
    Functions and macros take `name` as their (permanent) name.
    """
    if len(operands) != 2:
        raise RoughcutStructuralError("def requires exactly 2 operands: (def name value)")

    name, val_expr = operands
    if not isinstance(name, Symbol):
        raise RoughcutStructuralError(f"def first operand must be a Symbol, got {name}")
    value = evaluator.eval(val_expr, env)
    if isinstance(value, Function):
        value.name = name
    env.define(name, value)
    return value
