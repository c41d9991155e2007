"""Roughcut Language Server package.

This package provides:
- A pygls-based Language Server for the Roughcut Lisp dialect.
- An indexer that reads documents with the interpreter's Reader, without evaluation.

Note: The LSP does not evaluate user buffers; it builds a static index from text.
"""

__all__ = [
    "server",
    "indexer",
]
