"""Registry of special forms for the Roughcut evaluator.

Special forms are bound in the global environment like any other value, as
SpecialForm objects. The evaluator recognises their names in head position
and passes them the calling environment and their operands unevaluated
(`if` and `send` get some operands pre-evaluated, see Evaluator).
"""

from roughcut import SpecialFormFn, LispValue
from roughcut.types.environment import Environment
from roughcut.evaluation.special_forms.quote_forms import quote_form, quasiquote_form
from roughcut.evaluation.special_forms.define_form import define_form
from roughcut.evaluation.special_forms.set_form import set_form
from roughcut.evaluation.special_forms.lambda_form import fn_form, macro_form
from roughcut.evaluation.special_forms.if_form import if_form
from roughcut.evaluation.special_forms.send_form import send_form


class SpecialForm:
    __slots__ = ("name", "handler", "evaluator")

    def __init__(self, name: str, handler: SpecialFormFn, evaluator):
        self.name = name
        self.handler = handler
        self.evaluator = evaluator

    def __call__(self, env: Environment, *operands) -> LispValue:
        return self.handler(self.evaluator, env, *operands)

    def __str__(self):
        return f"#<special-form {self.name}>"

    __repr__ = __str__


# Forms receiving every operand unevaluated.
OPERAND_FORMS: dict[str, SpecialFormFn] = {
    "quote": quote_form,
    "quasiquote": quasiquote_form,
    "def": define_form,
    "set!": set_form,
    "fn": fn_form,
    "macro": macro_form,
}

SPECIAL_FORMS: dict[str, SpecialFormFn] = {
    **OPERAND_FORMS,
    "if": if_form,
    "send": send_form,
}
