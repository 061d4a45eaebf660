"""
Diagnostics translation.

Converts engine diagnostics (0-based ranges, LSP severities) into
``ParseIssue`` records with 1-based locations, split into fatal errors and
informational warnings.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .engine import Diagnostic, DiagnosticSeverity
from .errors import SemanticError, make_semantic_error


@dataclass(frozen=True)
class ParseIssue:
    """
    A located error or warning.

    Attributes:
        file: Source path or URI
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        message: Human-readable description
        severity: "error" or "warning"
        code: Engine diagnostic code, if any
    """

    file: Path | str
    line: int
    column: int
    message: str
    severity: str = "error"
    code: str | None = None

    def format(self) -> str:
        return f"{self.file}:{self.line}:{self.column}: {self.severity}: {self.message}"

    def to_error(self) -> SemanticError:
        return make_semantic_error(self.message, self.file, self.line, self.column)


@dataclass
class TranslatedDiagnostics:
    errors: list[ParseIssue] = field(default_factory=list)
    warnings: list[ParseIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def translate(diagnostics: Iterable[Diagnostic], file: Path | str) -> TranslatedDiagnostics:
    """
    Split diagnostics by severity.

    Errors are fatal, warnings informational; information and hint
    diagnostics are dropped.
    """
    result = TranslatedDiagnostics()
    for diagnostic in diagnostics:
        if diagnostic.severity == DiagnosticSeverity.ERROR:
            target, severity = result.errors, "error"
        elif diagnostic.severity == DiagnosticSeverity.WARNING:
            target, severity = result.warnings, "warning"
        else:
            continue
        start = diagnostic.range.start
        target.append(
            ParseIssue(
                file=file,
                line=start.line + 1,
                column=start.character + 1,
                message=diagnostic.message,
                severity=severity,
                code=diagnostic.code,
            )
        )
    return result
