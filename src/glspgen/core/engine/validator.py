"""
Validation pass over a grammar AST.

Checks name uniqueness, reference resolution and a few naming conventions.
Produces ``Diagnostic`` objects; never raises.
"""

from __future__ import annotations

from collections.abc import Iterator

from .ast import (
    Action,
    Alternatives,
    Assignment,
    CrossReference,
    Grammar,
    Group,
    Keyword,
    RuleCall,
    UnorderedGroup,
)
from .builder import Diagnostic, DiagnosticSeverity

BUILTIN_TERMINALS = frozenset({"ID", "STRING", "INT", "NUMBER", "BOOLEAN"})


def iter_elements(element) -> Iterator:
    """Yield ``element`` and every element nested inside it, depth first."""
    yield element
    match element:
        case Group(elements=children) | UnorderedGroup(elements=children) | Alternatives(
            elements=children
        ):
            for child in children:
                yield from iter_elements(child)
        case Assignment(terminal=terminal):
            yield from iter_elements(terminal)
        case CrossReference(terminal=terminal) if terminal is not None:
            yield from iter_elements(terminal)


class GrammarValidator:
    """Runs all checks on a grammar and collects diagnostics."""

    def validate(self, grammar: Grammar) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        diagnostics.extend(self._check_unique_names(grammar))
        diagnostics.extend(self._check_references(grammar))
        diagnostics.extend(self._check_rule_names(grammar))
        diagnostics.extend(self._check_entry_rule(grammar))
        diagnostics.extend(self._check_feature_assignments(grammar))
        return diagnostics

    def _check_unique_names(self, grammar: Grammar) -> Iterator[Diagnostic]:
        seen: set[str] = set()
        for decl in grammar.declarations:
            if decl.name in seen:
                yield Diagnostic(
                    DiagnosticSeverity.ERROR,
                    "A rule's name has to be unique.",
                    decl.range,
                    code="duplicate-name",
                )
            seen.add(decl.name)

    def _check_references(self, grammar: Grammar) -> Iterator[Diagnostic]:
        known = {decl.name for decl in grammar.declarations} | BUILTIN_TERMINALS
        # Inferred types declared through `infers`/`returns`/actions are valid targets
        for rule in grammar.parser_rules:
            if rule.returns_type:
                known.add(rule.returns_type)
            for element in iter_elements(rule.definition):
                if isinstance(element, Action):
                    known.add(element.type)

        severity = DiagnosticSeverity.WARNING if grammar.imports else DiagnosticSeverity.ERROR
        for rule in grammar.parser_rules:
            for element in iter_elements(rule.definition):
                match element:
                    case RuleCall(rule=name) if name not in known:
                        yield Diagnostic(
                            severity,
                            f"Could not resolve reference to AbstractRule named '{name}'.",
                            element.range,
                            code="unresolved-reference",
                        )
                    case CrossReference(type=name) if name not in known:
                        yield Diagnostic(
                            severity,
                            f"Could not resolve reference to AbstractType named '{name}'.",
                            element.range,
                            code="unresolved-reference",
                        )

    def _check_rule_names(self, grammar: Grammar) -> Iterator[Diagnostic]:
        for rule in grammar.parser_rules:
            if not rule.name[:1].isupper():
                yield Diagnostic(
                    DiagnosticSeverity.WARNING,
                    "Rule name should start with an upper case letter.",
                    rule.range,
                    code="rule-name-case",
                )

    def _check_entry_rule(self, grammar: Grammar) -> Iterator[Diagnostic]:
        if grammar.name is None or not grammar.parser_rules:
            return
        if not any(rule.entry for rule in grammar.parser_rules):
            yield Diagnostic(
                DiagnosticSeverity.WARNING,
                f"Grammar '{grammar.name}' has no entry rule.",
                grammar.range,
                code="missing-entry",
            )

    def _check_feature_assignments(self, grammar: Grammar) -> Iterator[Diagnostic]:
        for rule in grammar.parser_rules:
            first: dict[str, Assignment] = {}
            for element in iter_elements(rule.definition):
                if not isinstance(element, Assignment):
                    continue
                previous = first.setdefault(element.feature, element)
                if previous is not element and not _same_terminal(
                    previous.terminal, element.terminal
                ):
                    yield Diagnostic(
                        DiagnosticSeverity.WARNING,
                        f"Feature '{element.feature}' of rule '{rule.name}' is assigned "
                        "with different types; the first assignment is used.",
                        element.range,
                        code="conflicting-assignment",
                    )


def _same_terminal(a, b) -> bool:
    match a, b:
        case Keyword(), Keyword():
            return True
        case RuleCall(rule=x), RuleCall(rule=y):
            return x == y
        case CrossReference(type=x), CrossReference(type=y):
            return x == y
    return a == b


__all__ = ["BUILTIN_TERMINALS", "GrammarValidator", "iter_elements"]
