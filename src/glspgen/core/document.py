"""
Grammar document parsing.

Builds a document through the grammar engine and turns the first lexer or
parser error into an exception. Never touches the filesystem.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from .engine import Document, DocumentBuilder
from .errors import extract_snippet, make_lex_error, make_syntax_error

logger = logging.getLogger(__name__)

_default_builder: DocumentBuilder | None = None


def default_builder() -> DocumentBuilder:
    global _default_builder
    if _default_builder is None:
        _default_builder = DocumentBuilder()
    return _default_builder


def file_label(uri: str) -> Path | str:
    """Human-facing name for a document URI: the path for ``file://`` URIs."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return uri


def parse_document(
    text: str, uri: str, builder: DocumentBuilder | None = None
) -> Document:
    """
    Build a grammar document and fail on the first structural error.

    Args:
        text: Grammar source text
        uri: Document URI (``file://`` or a synthetic one such as ``memory://``)
        builder: Document builder to use (default: shared builder)

    Returns:
        Document with AST and validation diagnostics

    Raises:
        LexError: If the text cannot be tokenized
        GrammarSyntaxError: If the text is not a valid grammar, including
            empty or whitespace-only text
    """
    label = file_label(uri)
    if not text.strip():
        logger.error(f"Empty grammar content in {label}")
        raise make_syntax_error("Cannot parse empty grammar content", label, 1, 1)

    document = (builder or default_builder()).build(text, uri)

    if document.lexer_errors:
        error = document.lexer_errors[0]
        logger.error(f"Lexer error in {label}: {error.message}")
        line, column = error.range.start.line + 1, error.range.start.character + 1
        raise make_lex_error(
            error.message, label, line, column, snippet=extract_snippet(text, line)
        )

    if document.parser_errors:
        error = document.parser_errors[0]
        logger.error(f"Parser error in {label}: {error.message}")
        line, column = error.range.start.line + 1, error.range.start.character + 1
        raise make_syntax_error(
            error.message,
            label,
            line,
            column,
            end_line=error.range.end.line + 1,
            end_column=error.range.end.character + 1,
            snippet=extract_snippet(text, line),
        )

    return document
