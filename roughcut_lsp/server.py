from __future__ import annotations

"""
A minimal pygls-based Language Server for Roughcut.

Features:
- Text synchronization and document store
- Diagnostics: reader errors (unbalanced parens, unterminated strings, bad numbers...)
- Hover: builtin signatures and locally defined symbols
- Completion: locals, builtins
- Signature Help: for builtins and local functions
- Document Symbols: from indexer

Note: We avoid evaluating the buffer. We build a static index per document.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from pygls.server import LanguageServer
from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    ParameterInformation,
    Position,
    Range,
    SignatureHelp,
    SignatureHelpOptions,
    SignatureHelpParams,
    SignatureInformation,
    SymbolKind,
    TextDocumentSyncKind,
)

from roughcut import __version__
from roughcut_lsp.indexer import build_index, BUILTIN_SIGNATURES, DocumentIndex

logger = logging.getLogger(__name__)

SOURCE = "roughcut-ls"
WORD_BREAKS = " \t()\n\r'`,~\""

SYMBOL_KINDS = {
    "var": SymbolKind.Variable,
    "function": SymbolKind.Function,
    "macro": SymbolKind.Function,
}


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class RoughcutLanguageServer(LanguageServer):
    CMD_NAME = "roughcut-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, __version__, text_document_sync_kind=TextDocumentSyncKind.Full)
        self.documents: Dict[str, DocumentState] = {}


ls = RoughcutLanguageServer()


# --- Text sync ---
def _update(uri: str, text: str) -> DocumentState:
    state = DocumentState(text=text, index=build_index(text))
    ls.documents[uri] = state
    logger.debug("indexed %s: %d forms, %d definitions", uri, state.index.forms, len(state.index.symbols))
    return state


@ls.feature("textDocument/didOpen")
def did_open(params: DidOpenTextDocumentParams):
    uri = params.text_document.uri
    state = _update(uri, params.text_document.text or "")
    ls.publish_diagnostics(uri, diagnostics(state.index))


@ls.feature("textDocument/didChange")
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    # full-text sync: the last change carries the whole document
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        text = ls.documents[uri].text if uri in ls.documents else ""
    state = _update(uri, text)
    ls.publish_diagnostics(uri, diagnostics(state.index))


@ls.feature("textDocument/didClose")
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


# --- Diagnostics ---
def _mk_range(line: int, col: int, length: int = 1) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + length))


def diagnostics(idx: DocumentIndex) -> List[Diagnostic]:
    if idx.error is None:
        return []
    err = idx.error
    return [
        Diagnostic(
            range=_mk_range(err.line, err.col),
            message=err.message,
            severity=DiagnosticSeverity.Error,
            source=SOURCE,
        )
    ]


# --- Hover ---
def hover_text(word: str, idx: DocumentIndex) -> Optional[str]:
    # local definitions shadow builtins
    if word in idx.symbols:
        sdef = idx.symbols[word]
        text = f"{word}: {sdef.kind} (defined at {sdef.line + 1}:{sdef.col + 1})"
        if sdef.signature:
            text = f"{sdef.signature}\n{text}"
        return text
    return BUILTIN_SIGNATURES.get(word)


@ls.feature("textDocument/hover")
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    word = extract_word_at(state.text, params.position)
    if not word:
        return None
    contents = hover_text(word, state.index)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
def completion_items(idx: DocumentIndex, prefix: str = "") -> List[CompletionItem]:
    items: List[CompletionItem] = []
    for name, sig in BUILTIN_SIGNATURES.items():
        if name.startswith(prefix) and name not in idx.symbols:
            items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=sig))
    for name, sdef in idx.symbols.items():
        if name.startswith(prefix):
            kind = CompletionItemKind.Variable if sdef.kind == "var" else CompletionItemKind.Function
            items.append(CompletionItem(label=name, kind=kind, detail=sdef.signature))
    return items


@ls.feature("textDocument/completion", CompletionOptions(trigger_characters=["("]))
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return CompletionList(is_incomplete=False, items=[])
    prefix = _current_token(get_line_prefix(state.text, params.position))
    return CompletionList(is_incomplete=False, items=completion_items(state.index, prefix))


# --- Signature Help ---
def signature_for(name: str, idx: DocumentIndex) -> Optional[str]:
    sdef = idx.symbols.get(name)
    if sdef is not None and sdef.signature:
        return sdef.signature
    return BUILTIN_SIGNATURES.get(name)


@ls.feature("textDocument/signatureHelp", SignatureHelpOptions(trigger_characters=["(", " "]))
def on_signature_help(params: SignatureHelpParams) -> Optional[SignatureHelp]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    callee = extract_callee_name(get_line_prefix(state.text, params.position))
    if not callee:
        return None
    label = signature_for(callee, state.index)
    if not label:
        return None

    # "(name a b & rest)" -> parameters a, b, &, rest
    params_list = label.strip("()").split()[1:]
    parameters = [ParameterInformation(label=p) for p in params_list]
    return SignatureHelp(
        signatures=[SignatureInformation(label=label, parameters=parameters)],
        active_signature=0,
        active_parameter=0,
    )


# --- Document Symbols ---
def document_symbols(idx: DocumentIndex) -> List[DocumentSymbol]:
    symbols: List[DocumentSymbol] = []
    for name, sdef in idx.symbols.items():
        rng = _mk_range(sdef.line, sdef.col, len(name))
        symbols.append(
            DocumentSymbol(
                name=name,
                kind=SYMBOL_KINDS[sdef.kind],
                range=rng,
                selection_range=rng,
                detail=sdef.signature,
            )
        )
    return symbols


@ls.feature("textDocument/documentSymbol")
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    return document_symbols(state.index)


# --- Helpers ---

def get_line_prefix(text: str, pos: Position) -> str:
    # Return the text from start of line up to pos
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return ""
    return lines[pos.line][: pos.character]


def _current_token(prefix: str) -> str:
    start = len(prefix)
    while start > 0 and prefix[start - 1] not in WORD_BREAKS:
        start -= 1
    return prefix[start:]


def extract_word_at(text: str, pos: Position) -> Optional[str]:
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return None
    line = lines[pos.line]
    start = min(pos.character, len(line))
    while start > 0 and line[start - 1] not in WORD_BREAKS:
        start -= 1
    end = pos.character
    while end < len(line) and line[end] not in WORD_BREAKS:
        end += 1
    return line[start:end] or None


def extract_callee_name(prefix: str) -> Optional[str]:
    # the first token after the last '('
    lp = prefix.rfind("(")
    if lp == -1:
        return None
    tail = prefix[lp + 1 :].split()
    return tail[0].rstrip(")") if tail else None


def main() -> None:
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
