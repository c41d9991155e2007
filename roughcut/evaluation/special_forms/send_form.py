from roughcut import LispValue
from roughcut.types.environment import Environment


def send_form(
    evaluator,
    env: Environment,
    receiver: LispValue,
    operation: LispValue = None,
    *args: LispValue,
) -> LispValue:
    """(send receiver :operation args...)

    The evaluator resolves the receiver and evaluates the remaining operands;
    the operation itself must be on the host allow-list.
    """
    if operation is None:
        return receiver
    return evaluator.host.invoke(receiver, operation, args)
