# Core type aliases for Roughcut's data model.
# Code and data share one representation: Symbols, Keywords, Cons cells ending in
# EmptyList, and plain Python scalars (None for nil, bool, int, float, str, re.Pattern).
#
# Naming guidance:
# - SExpression: Use in reader/quasiquote code to denote syntactic forms (code-as-data).
# - LispValue:  Use in evaluator/runtime code to denote evaluated values.
# Both aliases resolve to `Any` and are interchangeable.

from typing import Any, Callable

# Runtime value alias
LispValue = Any
# Forms alias (often used interchangeably in this codebase)
SExpression = LispValue

# Special form handler: (evaluator, env, *operands) -> value
SpecialFormFn = Callable[..., LispValue]

__version__ = "0.3.0"
