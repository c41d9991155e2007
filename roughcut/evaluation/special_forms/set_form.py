from roughcut import SExpression, LispValue
from roughcut.errors import RoughcutStructuralError
from roughcut.types.environment import Environment
from roughcut.types.symbol import Symbol


def set_form(evaluator, env: Environment, *operands: SExpression) -> LispValue:
    if len(operands) != 2:
        raise RoughcutStructuralError("set! requires exactly 2 operands: (set! var value)")
    var_sym, val_expr = operands
    if not isinstance(var_sym, Symbol):
        raise RoughcutStructuralError(f"set! first operand must be a Symbol, got {var_sym}")
    value = evaluator.eval(val_expr, env)
    env.assign(var_sym, value)

    return value
