"""
Document builder for the Langium grammar language.

Wraps the Lark parser: turns text into a ``Document`` holding the AST,
lexer/parser errors and validation diagnostics. Lark exceptions are captured
here and converted to diagnostics; callers decide what is fatal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path

from lark import Lark, UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken
from lark.lexer import PatternStr

from .ast import Grammar, Position, Range
from .transformer import LangiumTransformer

logger = logging.getLogger(__name__)

GRAMMAR_FILE = Path(__file__).parent / "langium.lark"

_OPENERS = {"{": "}", "(": ")", "[": "]"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


class DiagnosticSeverity(IntEnum):
    """LSP severity levels."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass(frozen=True)
class Diagnostic:
    severity: DiagnosticSeverity
    message: str
    range: Range
    code: str | None = None
    source: str = "langium"


@dataclass
class Document:
    """A built grammar document."""

    uri: str
    text: str
    grammar: Grammar | None = None
    lexer_errors: list[Diagnostic] = field(default_factory=list)
    parser_errors: list[Diagnostic] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(
            self.lexer_errors
            or self.parser_errors
            or any(d.severity == DiagnosticSeverity.ERROR for d in self.diagnostics)
        )


def create_parser() -> Lark:
    return Lark(
        GRAMMAR_FILE.read_text(encoding="utf-8"),
        parser="lalr",
        lexer="contextual",
        propagate_positions=True,
        maybe_placeholders=False,
    )


_lark_parser: Lark | None = None


def get_parser() -> Lark:
    """Return the process-wide Lark parser, building it on first use."""
    global _lark_parser
    if _lark_parser is None:
        _lark_parser = create_parser()
    return _lark_parser


def _point(line: int, column: int, length: int = 1) -> Range:
    """Range from a 1-based Lark position."""
    start = Position(max(line - 1, 0), max(column - 1, 0))
    return Range(start, Position(start.line, start.character + length))


def find_unclosed_bracket(text: str) -> tuple[str, int, int] | None:
    """
    Innermost bracket left open at the end of ``text``.

    Comments, quoted strings and regex literals are skipped. Returns
    ``(bracket, line, column)`` with 1-based positions, or None.
    """
    stack: list[tuple[str, int, int]] = []
    line, col = 1, 1
    i, n = 0, len(text)

    def advance(count: int) -> None:
        nonlocal i, line, col
        for ch in text[i : i + count]:
            if ch == "\n":
                line, col = line + 1, 1
            else:
                col += 1
        i += count

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""
        if ch == "/" and nxt == "/":
            end = text.find("\n", i)
            advance((end if end != -1 else n) - i)
        elif ch == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            advance((end + 2 if end != -1 else n) - i)
        elif ch in "\"'/":
            j = i + 1
            while j < n and text[j] != ch and text[j] != "\n":
                j += 2 if text[j] == "\\" else 1
            advance(min(j + 1, n) - i)
        elif ch in _OPENERS:
            stack.append((ch, line, col))
            advance(1)
        elif ch in _CLOSERS:
            if stack and stack[-1][0] == _CLOSERS[ch]:
                stack.pop()
            advance(1)
        else:
            advance(1)
    return stack[-1] if stack else None


class DocumentBuilder:
    """
    Builds ``Document`` objects from grammar text.

    Args:
        parser: Lark parser to use (default: shared module parser)
        validator: Object with ``validate(grammar) -> list[Diagnostic]``
    """

    def __init__(self, parser: Lark | None = None, validator=None) -> None:
        self._parser = parser
        if validator is None:
            from .validator import GrammarValidator

            validator = GrammarValidator()
        self.validator = validator

    @property
    def parser(self) -> Lark:
        if self._parser is None:
            self._parser = get_parser()
        return self._parser

    def build(self, text: str, uri: str, *, validation: bool = True) -> Document:
        document = Document(uri=uri, text=text)
        try:
            tree = self.parser.parse(text)
        except UnexpectedCharacters as e:
            document.lexer_errors.append(self._lexer_error(e))
            return document
        except (UnexpectedToken, UnexpectedEOF) as e:
            document.parser_errors.append(self._parser_error(e, text))
            return document

        document.grammar = LangiumTransformer(text).transform(tree)
        if validation:
            document.diagnostics.extend(self.validator.validate(document.grammar))
        logger.debug(
            f"Built {uri}: {len(document.grammar.declarations)} declarations, "
            f"{len(document.diagnostics)} diagnostics"
        )
        return document

    # ---- Error conversion ----

    def _lexer_error(self, e: UnexpectedCharacters) -> Diagnostic:
        return Diagnostic(
            severity=DiagnosticSeverity.ERROR,
            message=f"Unexpected character {e.char!r}",
            range=_point(e.line, e.column),
            code="lexing-error",
        )

    def _parser_error(self, e: UnexpectedInput, text: str) -> Diagnostic:
        at_end = isinstance(e, UnexpectedEOF) or (
            isinstance(e, UnexpectedToken) and e.token.type == "$END"
        )
        unclosed = find_unclosed_bracket(text)

        if at_end:
            if unclosed:
                bracket, line, column = unclosed
                message = f"Unexpected end of input: '{bracket}' is never closed"
                return self._syntax(message, _point(line, column))
            message = "Unexpected end of input"
            if isinstance(e, UnexpectedToken):
                message += f", expecting {self._describe_expected(e.expected)}"
            return self._syntax(message, self._end_range(e, text))

        token = e.token
        message = (
            f"Unexpected token {str(token)!r}, "
            f"expecting {self._describe_expected(e.expected)}"
        )
        if unclosed:
            bracket, line, column = unclosed
            message += f" ('{bracket}' opened at {line}:{column} is never closed)"
        return self._syntax(message, _point(e.line, e.column, max(len(token), 1)))

    @staticmethod
    def _syntax(message: str, range_: Range) -> Diagnostic:
        return Diagnostic(
            severity=DiagnosticSeverity.ERROR,
            message=message,
            range=range_,
            code="parsing-error",
        )

    @staticmethod
    def _end_range(e: UnexpectedInput, text: str) -> Range:
        line = getattr(e, "line", -1)
        column = getattr(e, "column", -1)
        if line is None or line < 1:
            lines = text.split("\n")
            line, column = len(lines), len(lines[-1]) + 1
        return _point(line, column)

    def _describe_expected(self, expected: set[str]) -> str:
        names = []
        for name in sorted(expected):
            if name == "$END":
                names.append("end of input")
                continue
            try:
                pattern = self.parser.get_terminal(name).pattern
            except KeyError:
                names.append(name)
                continue
            names.append(repr(pattern.value) if isinstance(pattern, PatternStr) else name)
        if len(names) == 1:
            return names[0]
        return "one of " + ", ".join(names)
