"""
AST normalizer.

Walks a grammar AST and produces the normalized interfaces and type aliases
consumed by generators:

- parser rules with assignments become implicit interfaces, with property
  types inferred from the assigned terminal
- interface declarations are copied with their attribute types rendered
- type declarations are rendered, and pure string-literal unions also expose
  their literal values

Unsupported shapes inside a declaration degrade that one property or type to
``unknown`` and are recorded as anomalies; normalization itself never fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .engine.ast import (
    Alternatives,
    ArrayType,
    Assignment,
    CrossReference,
    Grammar,
    Group,
    InterfaceDecl,
    Keyword,
    ParserRule,
    ReferenceType,
    RuleCall,
    SimpleType,
    TerminalRule,
    TypeDecl,
    TypeDefinition,
    UnionType,
    UnorderedGroup,
    node_type,
)
from .ir import UNKNOWN_TYPE, Interface, Property, TypeAlias

logger = logging.getLogger(__name__)

# Built-in terminal rules and the primitive they produce
TERMINAL_TYPE_ALIASES = {
    "ID": "string",
    "STRING": "string",
    "NUMBER": "number",
    "INT": "number",
    "BOOLEAN": "boolean",
}

OPTIONAL_OPERATOR = "?="
ARRAY_OPERATOR = "+="
ARRAY_CARDINALITIES = frozenset({"*", "+"})


@dataclass(frozen=True)
class NormalizationAnomaly:
    """
    A construct the normalizer could not classify.

    Attributes:
        declaration: Name of the rule, interface or type being normalized
        feature: Property name, or None for a whole type alias
        node_type: AST node kind that was not understood
        reason: Short explanation
    """

    declaration: str
    feature: str | None
    node_type: str
    reason: str

    def describe(self) -> str:
        where = f"{self.declaration}.{self.feature}" if self.feature else self.declaration
        return f"{where}: {self.reason} ({self.node_type}), typed as '{UNKNOWN_TYPE}'"


@dataclass
class NormalizedGrammar:
    interfaces: list[Interface] = field(default_factory=list)
    types: list[TypeAlias] = field(default_factory=list)
    anomalies: list[NormalizationAnomaly] = field(default_factory=list)


class AstNormalizer:
    """
    Converts a grammar AST into interfaces and type aliases.

    One instance normalizes one grammar; use ``normalize()`` for the common case.
    """

    def __init__(self) -> None:
        self.anomalies: list[NormalizationAnomaly] = []

    def normalize(self, grammar: Grammar) -> NormalizedGrammar:
        result = NormalizedGrammar()
        for declaration in grammar.declarations:
            match declaration:
                case ParserRule():
                    interface = self._rule_interface(declaration)
                    if interface is not None:
                        result.interfaces.append(interface)
                case InterfaceDecl():
                    result.interfaces.append(self._declared_interface(declaration))
                case TypeDecl():
                    result.types.append(self._type_alias(declaration))
                case TerminalRule():
                    pass
        result.anomalies = list(self.anomalies)
        for anomaly in result.anomalies:
            logger.debug(f"Normalization anomaly: {anomaly.describe()}")
        return result

    # =========================================================================
    # Implicit interfaces from parser rules
    # =========================================================================

    def _rule_interface(self, rule: ParserRule) -> Interface | None:
        if rule.fragment:
            return None
        assignments = collect_assignments(rule.definition)
        if not assignments:
            return None

        properties: dict[str, Property] = {}
        for assignment in assignments:
            if assignment.feature in properties:
                continue
            properties[assignment.feature] = Property(
                name=assignment.feature,
                type=self._infer_type(rule.name, assignment),
                optional=(
                    assignment.operator == OPTIONAL_OPERATOR
                    or assignment.cardinality == "?"
                ),
                array=(
                    assignment.operator == ARRAY_OPERATOR
                    or assignment.cardinality in ARRAY_CARDINALITIES
                ),
                reference=isinstance(assignment.terminal, CrossReference),
            )
        return Interface(name=rule.name, properties=tuple(properties.values()))

    def _infer_type(self, rule_name: str, assignment: Assignment) -> str:
        match assignment.terminal:
            case CrossReference(type=type_name):
                return type_name
            case RuleCall(rule=called):
                return TERMINAL_TYPE_ALIASES.get(called, called)
            case Keyword():
                return "string"
            case other:
                return self._anomaly(
                    rule_name,
                    assignment.feature,
                    other,
                    "assigned terminal has no single inferable type",
                )

    # =========================================================================
    # Declared interfaces and types
    # =========================================================================

    def _declared_interface(self, decl: InterfaceDecl) -> Interface:
        properties: dict[str, Property] = {}
        for attribute in decl.attributes:
            if attribute.name in properties:
                continue
            array = isinstance(attribute.type, ArrayType)
            type_node = attribute.type.element_type if array else attribute.type
            properties[attribute.name] = Property(
                name=attribute.name,
                type=self._render(decl.name, attribute.name, type_node),
                optional=attribute.optional,
                array=array,
                reference=isinstance(type_node, ReferenceType),
            )
        return Interface(
            name=decl.name,
            properties=tuple(properties.values()),
            super_types=decl.super_types,
        )

    def _type_alias(self, decl: TypeDecl) -> TypeAlias:
        return TypeAlias(
            name=decl.name,
            definition=self._render(decl.name, None, decl.type),
            union_types=string_literal_union(decl.type),
        )

    def _render(self, declaration: str, feature: str | None, node: TypeDefinition) -> str:
        """Render a type expression, e.g. ``'a' | 'b'`` or ``State[]``."""
        match node:
            case SimpleType(primitive=str(name)):
                return name
            case SimpleType(string_literal=str(value)):
                return f"'{value}'"
            case SimpleType(type_ref=str(name)):
                return name
            case ReferenceType(ref_text=text):
                return text.removeprefix("@")
            case ArrayType(element_type=UnionType() as inner):
                return f"({self._render(declaration, feature, inner)})[]"
            case ArrayType(element_type=inner):
                return f"{self._render(declaration, feature, inner)}[]"
            case UnionType(types=members):
                return " | ".join(self._render(declaration, feature, m) for m in members)
            case _:
                return self._anomaly(
                    declaration, feature, node, "unsupported type expression"
                )

    def _anomaly(
        self, declaration: str, feature: str | None, node: object, reason: str
    ) -> str:
        self.anomalies.append(
            NormalizationAnomaly(
                declaration=declaration,
                feature=feature,
                node_type=node_type(node),
                reason=reason,
            )
        )
        return UNKNOWN_TYPE


def collect_assignments(element) -> list[Assignment]:
    """
    All assignments in a rule body, in source order.

    Descends through alternatives, unordered groups and groups.
    """
    match element:
        case Assignment():
            return [element]
        case Group(elements=children) | UnorderedGroup(elements=children) | Alternatives(
            elements=children
        ):
            return [a for child in children for a in collect_assignments(child)]
    return []


def string_literal_union(node: TypeDefinition) -> tuple[str, ...] | None:
    """Literal values of a union made only of string literals, else None."""
    if not isinstance(node, UnionType):
        return None
    values = []
    for member in node.types:
        if not (isinstance(member, SimpleType) and member.string_literal is not None):
            return None
        values.append(member.string_literal)
    return tuple(values)


def normalize(grammar: Grammar) -> NormalizedGrammar:
    """Normalize a grammar AST into interfaces, type aliases and anomalies."""
    return AstNormalizer().normalize(grammar)
