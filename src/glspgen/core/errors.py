"""
Error types for grammar loading, parsing, and validation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class GrammarError(Exception):
    """Base exception for all grammar errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message

    @property
    def line(self) -> int | None:
        return self.context.line if self.context else None

    @property
    def column(self) -> int | None:
        return self.context.column if self.context else None


class GrammarFileNotFound(GrammarError):
    """
    Raised when a grammar source file cannot be read.

    Examples:
    - Path does not exist
    - Path is a directory
    - Permission denied
    """

    def __init__(self, path: Path | str, reason: str | None = None):
        self.path = Path(path)
        message = f"Grammar file not found: {self.path}"
        if reason:
            message = f"Cannot read grammar file {self.path}: {reason}"
        super().__init__(message)


class LexError(GrammarError):
    """
    Raised when grammar text cannot be tokenized.

    Examples:
    - Unterminated string literal
    - Characters outside the grammar language
    """

    pass


class GrammarSyntaxError(GrammarError):
    """
    Raised when a token stream does not form a valid grammar.

    Examples:
    - Unterminated interface block
    - Missing ':' after a rule name
    - Missing ';' at the end of a parser rule
    """

    pass


class SemanticError(GrammarError):
    """
    Raised when validation reports an error and validation was requested.

    Examples:
    - Rule call to a rule that is not declared
    - Cross-reference to an unknown type
    - Two rules sharing one name
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path or URI of the source where the error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        end_line: Optional end line (1-indexed)
        end_column: Optional end column (1-indexed)
        snippet: Optional source snippet around the error location
    """

    file: Path | str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "statemachine.langium:10:5"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippets start up to SNIPPET_RADIUS lines before the error
        start_line = max(1, self.line - SNIPPET_RADIUS)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


SNIPPET_RADIUS = 2


def extract_snippet(text: str, line: int) -> str:
    """Return the source lines around ``line`` (1-indexed)."""
    lines = text.splitlines()
    if not lines:
        return ""
    start = max(1, line - SNIPPET_RADIUS)
    end = min(len(lines), line + SNIPPET_RADIUS)
    return "\n".join(lines[start - 1 : end])


def make_lex_error(
    message: str,
    file: Path | str,
    line: int,
    column: int,
    snippet: str | None = None,
) -> LexError:
    """
    Helper to create a LexError with context.

    Args:
        message: Error description
        file: Source file path or URI
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet

    Returns:
        LexError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return LexError(message, context)


def make_syntax_error(
    message: str,
    file: Path | str,
    line: int,
    column: int,
    end_line: int | None = None,
    end_column: int | None = None,
    snippet: str | None = None,
) -> GrammarSyntaxError:
    """
    Helper to create a GrammarSyntaxError with context.

    Args:
        message: Error description
        file: Source file path or URI
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        end_line: Optional end line number
        end_column: Optional end column number
        snippet: Optional code snippet

    Returns:
        GrammarSyntaxError with context attached
    """
    context = ErrorContext(
        file=file,
        line=line,
        column=column,
        end_line=end_line,
        end_column=end_column,
        snippet=snippet,
    )
    return GrammarSyntaxError(message, context)


def make_semantic_error(
    message: str,
    file: Path | str | None = None,
    line: int | None = None,
    column: int | None = None,
) -> SemanticError:
    """
    Helper to create a SemanticError with optional context.

    Args:
        message: Error description
        file: Optional source file path or URI
        line: Optional line number
        column: Optional column number

    Returns:
        SemanticError with context if location provided
    """
    if file and line and column:
        context = ErrorContext(file=file, line=line, column=column)
        return SemanticError(message, context)
    return SemanticError(message)
