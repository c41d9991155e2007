import pytest

from roughcut.errors import RoughcutArityError
from roughcut.printer import inspect
from roughcut.types.cons import build
from roughcut.types.function import Macro
from roughcut.types.symbol import intern


def test_macro_result_is_evaluated_again(bare):
    bare.eval("(def m (macro () '(send 1 :+ 2)))")
    bare.eval("(def f (fn () '(send 1 :+ 2)))")
    assert bare.eval("(m)") == 3
    assert inspect(bare.eval("(f)")) == "(send 1 :+ 2)"


def test_macro_operands_arrive_unevaluated(bare):
    bare.eval("(def first-form (macro (a & more) `(quote ~a)))")
    assert bare.eval("(first-form (undefined stuff) also-undefined)") == build(intern("undefined"), intern("stuff"))


def test_expansion_runs_in_the_callers_environment(bare):
    bare.eval("(def get-y (macro () 'y))")
    assert bare.eval("((fn (y) (get-y)) 7)") == 7


def test_macro_body_runs_once_per_use(bare, capsys):
    bare.eval("(def noisy (macro (x) (puts \"expanding\") x))")
    assert bare.eval("(noisy 5)") == 5
    assert capsys.readouterr().out == "expanding\n"


def test_macro_arity(bare):
    bare.eval("(def one (macro (x) x))")
    with pytest.raises(RoughcutArityError):
        bare.eval("(one)")


def test_macroexpand_1(bare):
    bare.eval("(def swap (macro (a b) `(list ~b ~a)))")
    assert inspect(bare.eval("(macroexpand-1 '(swap 1 2))")) == "(list 2 1)"
    # not a macro call: returned unchanged
    assert inspect(bare.eval("(macroexpand-1 '(list 1 2))")) == "(list 1 2)"
    assert bare.eval("(macroexpand-1 5)") == 5


def test_call_site_is_not_rewritten(bare):
    bare.eval("(def twice (macro (x) `(list ~x ~x)))")
    bare.eval("(def form '(twice 3))")
    assert bare.eval("(eval form)") == build(3, 3)
    assert inspect(bare.eval("form")) == "(twice 3)"
    # redefining the macro changes the next evaluation of the same form
    bare.eval("(set! twice (macro (x) `(list ~x)))")
    assert bare.eval("(eval form)") == build(3)


def test_defmacro_and_defn(itp):
    itp.eval("(defmacro unless2 (c a b) `(if ~c ~b ~a))")
    assert isinstance(itp.eval("unless2"), Macro)
    assert itp.eval("(unless2 false 1 2)") == 1
    itp.eval("(defn sq (x) (* x x))")
    assert itp.eval("(sq 9)") == 81
    assert str(itp.eval("sq")) == "(defn sq (x) (* x x))"
