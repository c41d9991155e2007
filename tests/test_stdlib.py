import pytest

from roughcut.errors import RoughcutError
from roughcut.printer import inspect


def eval_lisp(itp, code: str):
    return itp.eval(code)


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(+)", 0),
        ("(+ 1 2 3)", 6),
        ("(+ 1 2.5)", 3.5),
        ('(+ "a" "b")', "ab"),
        ("(- 5)", -5),
        ("(- 10 1 2)", 7),
        ("(*)", 1),
        ("(* 2 3 4)", 24),
        ("(/ 20 2 5)", 2),
        ("(= 1 1)", True),
        ("(= '(1 2) '(1 2))", True),
        ("(< 1 2)", True),
        ("(> 1 2)", False),
        ("(<= 2 2)", True),
        ("(>= 1 2)", False),
        ("(inc 1)", 2),
        ("(dec 1)", 0),
        ("(not nil)", True),
        ("(not 0)", False),
        ("(nil? nil)", True),
        ("(nil? '())", False),
        ("(empty? '())", True),
        ("(empty? nil)", True),
        ("(empty? '(1))", False),
        ("(length '(1 2 3))", 3),
        ("(length nil)", 0),
        ("(first '(1 2))", 1),
        ("(second '(1 2))", 2),
        ("(first '())", None),
        ('(str "a" 1 :k nil)', "a1:knil"),
    ],
)
def test_functions(itp, source, expected):
    assert eval_lisp(itp, source) == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(map inc '(1 2 3))", "(2 3 4)"),
        ("(map (fn (x) (* x x)) '())", "()"),
        ("(filter (fn (x) (> x 1)) '(0 1 2 3))", "(2 3)"),
        ("(reduce + 0 '(1 2 3 4))", "10"),
        ("(rest '(1 2 3))", "(2 3)"),
        ("(rest nil)", "()"),
    ],
)
def test_list_functions(itp, source, expected):
    assert inspect(eval_lisp(itp, source)) == expected


def test_let(itp):
    assert eval_lisp(itp, "(let ((a 1) (b 2)) (+ a b))") == 3
    assert eval_lisp(itp, "(let () 5)") == 5
    # bindings do not leak
    itp.eval("(let ((hidden 1)) hidden)")
    with pytest.raises(RoughcutError):
        itp.eval("hidden")


def test_do_when_unless(itp, capsys):
    assert eval_lisp(itp, "(do 1 2 3)") == 3
    assert eval_lisp(itp, "(do)") is None
    assert eval_lisp(itp, '(when true (puts "yes") 1)') == 1
    assert eval_lisp(itp, "(when false 1)") is None
    assert eval_lisp(itp, "(unless false 2)") == 2
    assert eval_lisp(itp, "(unless true 2)") is None
    assert capsys.readouterr().out == "yes\n"


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(and)", True),
        ("(and 1 2)", 2),
        ("(and 1 nil 2)", None),
        ("(and false undefined)", False),
        ("(or)", None),
        ("(or nil 2)", 2),
        ("(or false nil)", None),
        ("(or 1 undefined)", 1),
    ],
)
def test_and_or_short_circuit(itp, source, expected):
    assert eval_lisp(itp, source) == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(cond)", None),
        ("(cond true 1)", 1),
        ("(cond false 1 true 2)", 2),
        ("(cond false 1 nil 2)", None),
        ("(cond (= 1 2) :a (= 1 1) :b)", "b"),
    ],
)
def test_cond(itp, source, expected):
    value = eval_lisp(itp, source)
    if isinstance(expected, str):
        value = value.name
    assert value == expected


def test_recursive_definitions(itp):
    itp.eval("(defn fact (n) (if (<= n 1) 1 (* n (fact (dec n)))))")
    assert eval_lisp(itp, "(fact 10)") == 3628800


def test_and_or_do_not_capture_user_names(itp):
    # the temporary binding is a gensym, so a user variable named like it is untouched
    assert eval_lisp(itp, "(let ((g 5)) (and g g))") == 5
    assert eval_lisp(itp, "(let ((g nil)) (or g 7))") == 7


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(= true 1)", False),
        ("(= false 0)", False),
        ("(= '(true) '(1))", False),
        ("(= '(false nil) '(false nil))", True),
        ("(= 2 2)", True),
    ],
)
def test_equality_keeps_booleans_distinct(itp, source, expected):
    assert eval_lisp(itp, source) is expected
