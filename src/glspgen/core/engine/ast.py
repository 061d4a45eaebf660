"""
Syntax tree for the Langium grammar language.

Every node kind is its own frozen dataclass, so consumers dispatch with a
single ``match`` over the classes instead of probing attributes. Ranges are
0-based (line, character) pairs and never take part in equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Cardinality = Literal["?", "*", "+"]
AssignmentOperator = Literal["=", "+=", "?="]


@dataclass(frozen=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position


NO_RANGE = Range(Position(0, 0), Position(0, 0))


def _range() -> Range:
    return field(default=NO_RANGE, compare=False, repr=False)


# =============================================================================
# Rule body elements
# =============================================================================


@dataclass(frozen=True)
class Keyword:
    """A literal token, e.g. ``'state'``."""

    value: str
    cardinality: Cardinality | None = None
    range: Range = _range()


@dataclass(frozen=True)
class RuleCall:
    """A call to a parser or terminal rule, e.g. ``ID`` or ``Expression<true>``."""

    rule: str
    arguments: tuple[str, ...] = ()
    cardinality: Cardinality | None = None
    range: Range = _range()


@dataclass(frozen=True)
class CrossReference:
    """A reference to another element, e.g. ``[State:ID]``."""

    type: str
    terminal: Keyword | RuleCall | None = None
    cardinality: Cardinality | None = None
    range: Range = _range()


@dataclass(frozen=True)
class Assignment:
    """``feature op terminal`` inside a parser rule, e.g. ``states+=State``."""

    feature: str
    operator: AssignmentOperator
    terminal: AbstractElement
    cardinality: Cardinality | None = None
    range: Range = _range()


@dataclass(frozen=True)
class Action:
    """A tree-rewrite action, e.g. ``{infer BinaryExpr.left=current}``."""

    type: str
    feature: str | None = None
    operator: AssignmentOperator | None = None
    infer: bool = False
    cardinality: Cardinality | None = None
    range: Range = _range()


@dataclass(frozen=True)
class Group:
    elements: tuple[AbstractElement, ...]
    cardinality: Cardinality | None = None
    range: Range = _range()


@dataclass(frozen=True)
class UnorderedGroup:
    elements: tuple[AbstractElement, ...]
    cardinality: Cardinality | None = None
    range: Range = _range()


@dataclass(frozen=True)
class Alternatives:
    elements: tuple[AbstractElement, ...]
    cardinality: Cardinality | None = None
    range: Range = _range()


AbstractElement = (
    Keyword
    | RuleCall
    | CrossReference
    | Assignment
    | Action
    | Group
    | UnorderedGroup
    | Alternatives
)


# =============================================================================
# Type expressions
# =============================================================================


@dataclass(frozen=True)
class SimpleType:
    """
    A primitive, a string literal, or a plain type name.

    Exactly one of the three markers is set.
    """

    primitive: str | None = None
    string_literal: str | None = None
    type_ref: str | None = None
    range: Range = _range()


@dataclass(frozen=True)
class ReferenceType:
    """A cross-reference type such as ``@State``; ``ref_text`` keeps the sigil."""

    ref_text: str
    range: Range = _range()


@dataclass(frozen=True)
class ArrayType:
    element_type: TypeDefinition
    range: Range = _range()


@dataclass(frozen=True)
class UnionType:
    types: tuple[TypeDefinition, ...]
    range: Range = _range()


TypeDefinition = SimpleType | ReferenceType | ArrayType | UnionType


# =============================================================================
# Top-level declarations
# =============================================================================


@dataclass(frozen=True)
class ParserRule:
    name: str
    definition: AbstractElement
    entry: bool = False
    fragment: bool = False
    parameters: tuple[str, ...] = ()
    returns_type: str | None = None
    infers_type: bool = False
    range: Range = _range()


@dataclass(frozen=True)
class TerminalRule:
    name: str
    definition: str
    hidden: bool = False
    fragment: bool = False
    returns_type: str | None = None
    range: Range = _range()


@dataclass(frozen=True)
class TypeAttribute:
    name: str
    type: TypeDefinition
    optional: bool = False
    range: Range = _range()


@dataclass(frozen=True)
class InterfaceDecl:
    name: str
    attributes: tuple[TypeAttribute, ...] = ()
    super_types: tuple[str, ...] = ()
    range: Range = _range()


@dataclass(frozen=True)
class TypeDecl:
    name: str
    type: TypeDefinition
    range: Range = _range()


@dataclass(frozen=True)
class GrammarImport:
    path: str
    alias: str | None = None
    range: Range = _range()


Declaration = ParserRule | TerminalRule | InterfaceDecl | TypeDecl


@dataclass(frozen=True)
class Grammar:
    """Root node. ``declarations`` keeps source order across all kinds."""

    name: str | None = None
    used_grammars: tuple[str, ...] = ()
    imports: tuple[GrammarImport, ...] = ()
    declarations: tuple[Declaration, ...] = ()
    range: Range = _range()

    @property
    def parser_rules(self) -> list[ParserRule]:
        return [d for d in self.declarations if isinstance(d, ParserRule)]

    @property
    def terminal_rules(self) -> list[TerminalRule]:
        return [d for d in self.declarations if isinstance(d, TerminalRule)]

    @property
    def interfaces(self) -> list[InterfaceDecl]:
        return [d for d in self.declarations if isinstance(d, InterfaceDecl)]

    @property
    def types(self) -> list[TypeDecl]:
        return [d for d in self.declarations if isinstance(d, TypeDecl)]


def node_type(node: object) -> str:
    """Tag of a node, e.g. ``"CrossReference"``."""
    return type(node).__name__
