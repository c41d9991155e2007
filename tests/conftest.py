import pytest

from roughcut.interpreter import Interpreter
from roughcut.types.symbol import symbols


# Most tests run Lisp source through an Interpreter. `bare` skips the
# bootstrap library so evaluator tests only see the builtins; `itp` is a
# full session with stdlib.lisp loaded.


@pytest.fixture
def bare():
    return Interpreter(prelude=None)


@pytest.fixture
def itp():
    return Interpreter()


@pytest.fixture
def sym():
    return symbols.intern
