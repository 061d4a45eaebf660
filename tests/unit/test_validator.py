"""Tests for the grammar validation pass."""

from pathlib import Path

from glspgen.core.engine import DiagnosticSeverity, DocumentBuilder


def diagnostics_for(builder: DocumentBuilder, text: str):
    document = builder.build(text, "memory://test.langium")
    assert document.grammar is not None
    return document.diagnostics


def codes(diagnostics) -> list[str]:
    return [d.code for d in diagnostics]


class TestValidGrammars:
    def test_statemachine(self, builder: DocumentBuilder, statemachine_path: Path) -> None:
        assert diagnostics_for(builder, statemachine_path.read_text()) == []

    def test_domainmodel(self, builder: DocumentBuilder, domainmodel_path: Path) -> None:
        assert diagnostics_for(builder, domainmodel_path.read_text()) == []

    def test_builtin_terminals_resolve(self, builder: DocumentBuilder) -> None:
        """ID, STRING, INT, NUMBER and BOOLEAN need no terminal declaration."""
        text = "A: a=ID b=STRING c=INT d=NUMBER e=BOOLEAN;"
        assert diagnostics_for(builder, text) == []


class TestUniqueNames:
    def test_duplicate_rule(self, builder: DocumentBuilder) -> None:
        diagnostics = diagnostics_for(builder, "A: x=ID;\nB: y=ID;\nA: z=ID;")
        (duplicate,) = diagnostics
        assert duplicate.severity == DiagnosticSeverity.ERROR
        assert duplicate.message == "A rule's name has to be unique."
        assert duplicate.range.start.line == 2

    def test_rule_and_type_share_name(self, builder: DocumentBuilder) -> None:
        diagnostics = diagnostics_for(builder, "A: x=ID;\ntype A = 'a' | 'b'")
        assert codes(diagnostics) == ["duplicate-name"]


class TestReferences:
    """Tests for reference resolution."""

    def test_unresolved_rule_call(self, builder: DocumentBuilder) -> None:
        (error,) = diagnostics_for(builder, "A: child=Missing;")
        assert error.severity == DiagnosticSeverity.ERROR
        assert "'Missing'" in error.message
        assert (error.range.start.line, error.range.start.character) == (0, 9)

    def test_unresolved_cross_reference(self, builder: DocumentBuilder) -> None:
        (error,) = diagnostics_for(builder, "A: ref=[Missing:ID];")
        assert error.code == "unresolved-reference"
        assert "AbstractType named 'Missing'" in error.message

    def test_action_and_returns_types_resolve(self, builder: DocumentBuilder) -> None:
        text = (
            "Expr returns Expression: {Literal} value=INT;\n"
            "Ref: to=[Expression] lit=[Literal];"
        )
        assert diagnostics_for(builder, text) == []

    def test_interfaces_and_types_resolve(self, builder: DocumentBuilder) -> None:
        text = "interface Named { name: string }\nA: ref=[Named];"
        assert diagnostics_for(builder, text) == []

    def test_imports_downgrade_to_warnings(self, builder: DocumentBuilder) -> None:
        """Names may come from imported grammars, so they only warn."""
        (warning,) = diagnostics_for(builder, "import './base'\nA: child=Missing;")
        assert warning.severity == DiagnosticSeverity.WARNING

    def test_super_types_not_checked(self, builder: DocumentBuilder) -> None:
        text = "interface A extends Nowhere { b: Elsewhere }"
        assert diagnostics_for(builder, text) == []


class TestConventions:
    def test_lowercase_rule_name(self, builder: DocumentBuilder) -> None:
        (warning,) = diagnostics_for(builder, "model: name=ID;")
        assert warning.severity == DiagnosticSeverity.WARNING
        assert warning.code == "rule-name-case"

    def test_named_grammar_without_entry(self, builder: DocumentBuilder) -> None:
        (warning,) = diagnostics_for(builder, "grammar G\nA: name=ID;")
        assert warning.code == "missing-entry"
        assert "'G'" in warning.message

    def test_unnamed_grammar_needs_no_entry(self, builder: DocumentBuilder) -> None:
        assert diagnostics_for(builder, "A: name=ID;") == []


class TestFeatureAssignments:
    def test_conflicting_types_warn(self, builder: DocumentBuilder) -> None:
        (warning,) = diagnostics_for(builder, "A: value=ID | value=INT;")
        assert warning.severity == DiagnosticSeverity.WARNING
        assert warning.code == "conflicting-assignment"
        assert "'value'" in warning.message

    def test_same_type_is_fine(self, builder: DocumentBuilder) -> None:
        assert diagnostics_for(builder, "A: items+=ID (',' items+=ID)*;") == []

    def test_keywords_count_as_same_type(self, builder: DocumentBuilder) -> None:
        assert diagnostics_for(builder, "A: op='+' | op='-';") == []
