from __future__ import annotations


class RoughcutError(Exception):
    """ Base class for all Roughcut errors"""
    pass


class RoughcutReadError(RoughcutError):
    """ Raised when the reader meets malformed, incomplete or unbalanced syntax"""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.reason = message
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column


class RoughcutEOFError(RoughcutReadError):
    """ Raised when input ends inside an incomplete construct"""


class RoughcutArityError(RoughcutError):
    """ Raised when a function or macro is called with the wrong number of arguments"""


class RoughcutNameError(RoughcutError):
    """ Raised when a symbol is read or assigned before it is bound"""


class RoughcutStructuralError(RoughcutError):
    """ Raised when a special form, parameter list or quasiquote template is malformed"""


class RoughcutTypeError(RoughcutError):
    """ Raised when a value of the wrong type is used (calling a non-function, splicing a non-list)"""


class RoughcutHostEscapeError(RoughcutError):
    """ Raised when a `send` names an unknown operation or the operation fails"""


class RoughcutExit(Exception):
    """ Unwinds straight to the top-level loop and ends the session"""

    def __init__(self, status: int = 0):
        super().__init__(status)
        self.status = status
