"""Tests for diagnostics translation."""

from pathlib import Path

from glspgen.core.diagnostics import ParseIssue, translate
from glspgen.core.engine import Diagnostic, DiagnosticSeverity
from glspgen.core.engine.ast import Position, Range
from glspgen.core.errors import SemanticError


def diagnostic(severity: DiagnosticSeverity, line: int, character: int, message: str = "m"):
    start = Position(line, character)
    return Diagnostic(severity, message, Range(start, start), code="test-code")


class TestTranslate:
    def test_positions_become_one_based(self) -> None:
        result = translate([diagnostic(DiagnosticSeverity.ERROR, 0, 0)], "g.langium")
        (issue,) = result.errors
        assert (issue.line, issue.column) == (1, 1)
        assert issue.code == "test-code"
        assert issue.severity == "error"

    def test_split_by_severity(self) -> None:
        result = translate(
            [
                diagnostic(DiagnosticSeverity.WARNING, 3, 4, "careful"),
                diagnostic(DiagnosticSeverity.ERROR, 1, 2, "broken"),
                diagnostic(DiagnosticSeverity.INFORMATION, 0, 0),
                diagnostic(DiagnosticSeverity.HINT, 0, 0),
            ],
            Path("g.langium"),
        )
        assert [i.message for i in result.errors] == ["broken"]
        assert [i.message for i in result.warnings] == ["careful"]
        assert result.warnings[0].severity == "warning"
        assert (result.warnings[0].line, result.warnings[0].column) == (4, 5)
        assert result.has_errors

    def test_empty(self) -> None:
        result = translate([], "g.langium")
        assert result.errors == []
        assert result.warnings == []
        assert not result.has_errors

    def test_keeps_order(self) -> None:
        result = translate(
            [diagnostic(DiagnosticSeverity.ERROR, n, 0, f"e{n}") for n in range(3)], "g"
        )
        assert [i.message for i in result.errors] == ["e0", "e1", "e2"]


class TestParseIssue:
    def test_format(self) -> None:
        issue = ParseIssue(Path("g.langium"), 2, 7, "Something odd", severity="warning")
        assert issue.format() == "g.langium:2:7: warning: Something odd"

    def test_to_error(self) -> None:
        issue = ParseIssue("memory://x.langium", 1, 10, "Could not resolve reference.")
        error = issue.to_error()
        assert isinstance(error, SemanticError)
        assert error.message == "Could not resolve reference."
        assert (error.line, error.column) == (1, 10)
        assert "memory://x.langium:1:10" in str(error)
