import re

import pytest
from hypothesis import given, settings, strategies as st

from roughcut.errors import RoughcutError, RoughcutEOFError, RoughcutReadError, RoughcutStructuralError
from roughcut.printer import inspect
from roughcut.reader.char_stream import EOF
from roughcut.reader.parser import Reader, read_from_string
from roughcut.types.cons import Cons, Empty, build
from roughcut.types.symbol import Keyword, SymbolTable, symbols


# ----------------------------------------
# 1. Atoms
# ----------------------------------------
@pytest.mark.parametrize(
    "source, expected",
    [
        ("123", 123),
        ("-123", -123),
        ("+7", 7),
        ("0", 0),
        ("3.14", 3.14),
        ("-1.23e+5", -123000.0),
        ("2e3", 2000.0),
        ('"hello"', "hello"),
        ('"a\\nb\\t\\"c\\""', 'a\nb\t"c"'),
        ('""', ""),
    ],
)
def test_read_literals(source, expected):
    value = read_from_string(source)
    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.parametrize("source, expected", [("nil", None), ("true", True), ("false", False)])
def test_read_constants(source, expected):
    assert read_from_string(source) is expected


def test_symbols_are_interned():
    a = read_from_string("foo")
    b = read_from_string("(foo)").first
    assert a is b
    assert a is symbols.intern("foo")


@pytest.mark.parametrize("source", ["-", "+", "->", "set!", "empty?", ".foo", "a.b", "/"])
def test_read_symbol_tokens(source):
    assert read_from_string(source) is symbols.intern(source)


@pytest.mark.parametrize("source", ["12abc", "1.", "01", "1.5.2", "-3x"])
def test_invalid_numbers(source):
    with pytest.raises(RoughcutReadError, match="invalid number"):
        read_from_string(source)


# ----------------------------------------
# 2. Lists and dotted pairs
# ----------------------------------------
@pytest.mark.parametrize("source", ["()", "(a)", "(a b c)", "(1 (2 (3)) \"s\")", "(a . b)", "(a b . c)"])
def test_list_read_print_symmetry(source):
    assert inspect(read_from_string(source)) == source


def test_read_dotted_pair():
    value = read_from_string("(a . b)")
    assert isinstance(value, Cons)
    assert value.first is symbols.intern("a")
    assert value.rest is symbols.intern("b")
    assert not value.is_proper()


def test_empty_list_reads_as_empty():
    assert read_from_string("()") is Empty
    assert read_from_string("(  ; nothing\n )") is Empty


@pytest.mark.parametrize(
    "source, message",
    [
        ("(. a)", "outside dotted pair"),
        ("(a .)", "outside dotted pair"),
        ("(a . b c)", "more than one object"),
        ("(1 2 . 3 4", "more than one object"),
        (".", "outside dotted pair"),
    ],
)
def test_malformed_dotted_pairs(source, message):
    with pytest.raises(RoughcutReadError, match=message):
        read_from_string(source)


def test_close_paren_sequence():
    reader = Reader("())")
    assert reader.read() is Empty
    with pytest.raises(RoughcutReadError, match="unexpected"):
        reader.read()
    assert reader.read(False) is EOF


# ----------------------------------------
# 3. Quote sugar
# ----------------------------------------
@pytest.mark.parametrize(
    "source, head",
    [
        ("'x", "quote"),
        ("`x", "quasiquote"),
        ("~x", "unquote"),
        (",x", "unquote"),
        ("~@x", "unquote-splicing"),
        (",@x", "unquote-splicing"),
    ],
)
def test_quote_sugar(source, head):
    value = read_from_string(source)
    assert value == build(symbols.intern(head), symbols.intern("x"))


def test_quote_sugar_prints_back():
    assert inspect(read_from_string("`(a ~b ~@c 'd)")) == "`(a ,b ,@c 'd)"


@pytest.mark.parametrize("source", ["`,@foo", "`~@foo"])
def test_quasiquoted_splice_is_rejected_at_read_time(source):
    with pytest.raises(RoughcutStructuralError):
        read_from_string(source)


# ----------------------------------------
# 4. Keywords, regexps, comments
# ----------------------------------------
def test_keywords():
    assert read_from_string(":foo") == Keyword("foo")
    assert read_from_string("::Foo") is symbols.intern("::Foo")
    with pytest.raises(RoughcutReadError, match="empty keyword"):
        read_from_string(":")


@pytest.mark.parametrize(
    "source, pattern, flags",
    [
        ("/ab+c/", "ab+c", 0),
        ("/ab+c/i", "ab+c", re.IGNORECASE),
        ("/a.b/mx", "a.b", re.DOTALL | re.VERBOSE),
        ("/a\\/b/", "a\\/b", 0),
        ("%r{a{2}}", "a{2}", 0),
        ("%r{/path/}i", "/path/", re.IGNORECASE),
    ],
)
def test_regexps(source, pattern, flags):
    value = read_from_string(source)
    assert isinstance(value, re.Pattern)
    assert value.pattern == pattern
    assert value.flags & (re.IGNORECASE | re.DOTALL | re.VERBOSE) == flags


def test_regexp_errors():
    with pytest.raises(RoughcutReadError, match="unknown regexp option"):
        read_from_string("/abc/q")
    with pytest.raises(RoughcutEOFError):
        read_from_string("/abc")


def test_comments_are_skipped():
    assert Reader("; a comment\n42 ; trailing\n").read_all() == [42]


# ----------------------------------------
# 5. End of input and error positions
# ----------------------------------------
@pytest.mark.parametrize("source", ["(a b", '"abc', "'", "(a . b"])
def test_eof_inside_construct(source):
    with pytest.raises(RoughcutEOFError):
        read_from_string(source)


def test_eof_at_top_level():
    assert Reader("   ").read(False) is EOF
    with pytest.raises(RoughcutEOFError, match="reached EOF"):
        Reader("").read()


def test_read_error_position():
    with pytest.raises(RoughcutReadError) as excinfo:
        read_from_string("(a\n  12x)")
    assert (excinfo.value.line, excinfo.value.column) == (2, 6)
    assert "line 2, column 6" in str(excinfo.value)


def test_separate_symbol_tables():
    table = SymbolTable()
    value = Reader("foo", table).read()
    assert value is table.intern("foo")
    assert value is not symbols.intern("foo")


# ----------------------------------------
# 6. Property tests
# ----------------------------------------
@given(st.text(alphabet="()ab1 .'`~@,:;\"/%r{}\n-", max_size=60))
@settings(max_examples=300)
def test_reader_never_fails_outside_its_errors(source):
    reader = Reader(source)
    try:
        reader.read_all()
    except RoughcutError:
        pass


@given(st.lists(st.integers(min_value=-10**6, max_value=10**6), max_size=20))
def test_integer_lists_round_trip(values):
    source = "(" + " ".join(str(v) for v in values) + ")"
    assert list(read_from_string(source)) == values
