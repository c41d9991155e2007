from lsprotocol.types import DiagnosticSeverity, Position, SymbolKind

from roughcut_lsp.indexer import BUILTIN_SIGNATURES, build_index
from roughcut_lsp import server


SOURCE = """\
; helpers
(def limit 10)
(defn square (x) (* x x))
(defmacro twice (form) `(do ~form ~form))
(def inc2 (fn (n & more) (+ n 2)))
(square limit)
"""


# ----------------------------------------
# Indexer
# ----------------------------------------
def test_definitions_are_indexed():
    idx = build_index(SOURCE)
    assert set(idx.symbols) == {"limit", "square", "twice", "inc2"}
    assert idx.forms == 5
    assert idx.error is None


def test_definition_kinds_and_positions():
    idx = build_index(SOURCE)
    limit = idx.symbols["limit"]
    assert (limit.kind, limit.line, limit.col) == ("var", 1, 5)
    square = idx.symbols["square"]
    assert (square.kind, square.line, square.col) == ("function", 2, 6)
    assert idx.symbols["twice"].kind == "macro"
    assert idx.symbols["inc2"].kind == "function"


def test_signatures():
    idx = build_index(SOURCE)
    assert idx.symbols["square"].signature == "(square x)"
    assert idx.symbols["inc2"].signature == "(inc2 n & more)"
    assert idx.symbols["limit"].signature is None


def test_reader_errors_are_reported_with_positions():
    idx = build_index("(def ok 1)\n(defn broken (x)\n  (+ x 1)")
    assert "ok" in idx.symbols
    assert idx.error is not None
    assert idx.error.message == "unterminated list"
    assert idx.error.line == 2


def test_bad_number_position():
    idx = build_index("(list 1 2x)")
    assert idx.error.message == "invalid number: 2x"
    assert (idx.error.line, idx.error.col) == (0, 10)


def test_index_does_not_evaluate():
    # an undefined function call and an exit are just data to the indexer
    idx = build_index("(exit)\n(nope 1 2)\n(def after 1)")
    assert "after" in idx.symbols


def test_comments_inside_definitions_do_not_shift_positions():
    idx = build_index("(defn ; the name follows\n  f () 1)")
    assert (idx.symbols["f"].line, idx.symbols["f"].col) == (1, 2)


# ----------------------------------------
# Server helpers
# ----------------------------------------
def test_diagnostics():
    assert server.diagnostics(build_index(SOURCE)) == []
    [diag] = server.diagnostics(build_index("(a b"))
    assert diag.severity == DiagnosticSeverity.Error
    assert diag.source == "roughcut-ls"
    assert diag.range.start.line == 0


def test_hover_text():
    idx = build_index(SOURCE)
    assert server.hover_text("send", idx) == BUILTIN_SIGNATURES["send"]
    assert server.hover_text("square", idx).startswith("(square x)\nsquare: function")
    assert server.hover_text("unknown-word", idx) is None


def test_word_and_callee_extraction():
    text = "(square limit)\n"
    assert server.extract_word_at(text, Position(line=0, character=3)) == "square"
    assert server.extract_word_at(text, Position(line=0, character=9)) == "limit"
    assert server.extract_word_at(text, Position(line=5, character=0)) is None
    assert server.extract_callee_name("(foo (bar 1 ") == "bar"
    assert server.extract_callee_name("no parens") is None


def test_completion_items():
    idx = build_index(SOURCE)
    labels = [item.label for item in server.completion_items(idx, "sq")]
    assert labels == ["square"]
    all_labels = {item.label for item in server.completion_items(idx)}
    assert {"defn", "send", "limit"} <= all_labels


def test_document_symbols():
    symbols = {s.name: s for s in server.document_symbols(build_index(SOURCE))}
    assert symbols["limit"].kind == SymbolKind.Variable
    assert symbols["square"].kind == SymbolKind.Function
    assert symbols["square"].range.start.line == 2
