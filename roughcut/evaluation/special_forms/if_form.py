from roughcut import SExpression, LispValue
from roughcut.types.environment import Environment


def is_true(value: LispValue) -> bool:
    # only nil and false are falsey
    return value is not None and value is not False


def if_form(
    evaluator,
    env: Environment,
    condition: LispValue,
    then_expr: SExpression,
    else_expr: SExpression = None,
) -> LispValue:
    """The condition arrives already evaluated; a missing else branch yields nil."""
    if is_true(condition):
        return evaluator.eval(then_expr, env)
    return evaluator.eval(else_expr, env)
