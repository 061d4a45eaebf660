"""Tests for grammar error types."""

from pathlib import Path

from glspgen.core.errors import (
    ErrorContext,
    GrammarError,
    GrammarFileNotFound,
    GrammarSyntaxError,
    LexError,
    SemanticError,
    extract_snippet,
    make_lex_error,
    make_semantic_error,
    make_syntax_error,
)


class TestErrorContext:
    """Tests for ErrorContext formatting."""

    def test_location_only(self) -> None:
        """Without a snippet only file:line:column is shown."""
        context = ErrorContext(file="model.langium", line=3, column=7)
        assert context.format() == "model.langium:3:7"

    def test_snippet_marker(self) -> None:
        """The marker is placed under the error column."""
        text = "grammar X\n\ninterface Node {\n    name: string\n"
        context = ErrorContext(
            file="x.langium", line=3, column=16, snippet=extract_snippet(text, 3)
        )
        formatted = context.format()

        lines = formatted.split("\n")
        assert lines[0] == "x.langium:3:16"
        assert "   3 | interface Node {" in lines
        marker = lines[lines.index("   3 | interface Node {") + 1]
        assert marker.index("^") == len("   3 | ") + 15


class TestExtractSnippet:
    def test_window_around_line(self) -> None:
        text = "\n".join(f"line{i}" for i in range(1, 11))
        assert extract_snippet(text, 5) == "line3\nline4\nline5\nline6\nline7"

    def test_clamped_at_start(self) -> None:
        assert extract_snippet("a\nb\nc\nd", 1) == "a\nb\nc"

    def test_empty_text(self) -> None:
        assert extract_snippet("", 1) == ""


class TestErrorHelpers:
    """Tests for the error constructor helpers."""

    def test_make_lex_error(self) -> None:
        error = make_lex_error("Unexpected character '#'", "a.langium", 2, 5)
        assert isinstance(error, LexError)
        assert isinstance(error, GrammarError)
        assert error.line == 2
        assert error.column == 5
        assert str(error).startswith("a.langium:2:5")
        assert "Unexpected character '#'" in str(error)

    def test_make_syntax_error_with_range(self) -> None:
        error = make_syntax_error("boom", Path("b.langium"), 1, 2, end_line=1, end_column=3)
        assert isinstance(error, GrammarSyntaxError)
        assert error.context is not None
        assert error.context.end_column == 3
        assert error.message == "boom"

    def test_make_semantic_error_without_location(self) -> None:
        """A semantic error without location has no context."""
        error = make_semantic_error("Unresolved reference")
        assert isinstance(error, SemanticError)
        assert error.context is None
        assert error.line is None
        assert str(error) == "Unresolved reference"

    def test_make_semantic_error_with_location(self) -> None:
        error = make_semantic_error("Unresolved reference", "c.langium", 4, 9)
        assert error.line == 4
        assert str(error).startswith("c.langium:4:9")


class TestGrammarFileNotFound:
    def test_missing(self) -> None:
        error = GrammarFileNotFound("missing.langium")
        assert error.path == Path("missing.langium")
        assert "Grammar file not found" in str(error)

    def test_with_reason(self) -> None:
        error = GrammarFileNotFound("dir", "not a file")
        assert "Cannot read grammar file dir: not a file" == str(error)
