"""
Lark parse tree -> grammar AST.

Each method corresponds to one rule (or alias) in ``langium.lark``.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import Any

from lark import Token, Transformer, v_args
from lark.tree import Meta

from ..ir.grammar import PRIMITIVE_TYPES
from .ast import (
    NO_RANGE,
    Action,
    Alternatives,
    ArrayType,
    Assignment,
    CrossReference,
    Grammar,
    GrammarImport,
    Group,
    InterfaceDecl,
    Keyword,
    ParserRule,
    Position,
    Range,
    ReferenceType,
    RuleCall,
    SimpleType,
    TerminalRule,
    TypeAttribute,
    TypeDecl,
    UnionType,
    UnorderedGroup,
)

_ESCAPE = re.compile(r"\\(.)")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f"}


# ---- Helper dataclasses (internal to transformer) ----


@dataclass
class _Header:
    name: str
    used_grammars: tuple[str, ...]


@dataclass
class _Names:
    """Comma separated ID list: rule parameters, extends, with, call arguments."""

    names: tuple[str, ...]


@dataclass
class _Returns:
    type_name: str
    inferred: bool


def _name(token: Token) -> str:
    """Identifier text without the ``^`` keyword escape."""
    return str(token).removeprefix("^")


def _unquote(token: Token) -> str:
    text = str(token)[1:-1]
    return _ESCAPE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), text)


def _tokens(children: list[Any], *types: str) -> list[Token]:
    return [c for c in children if isinstance(c, Token) and c.type in types]


def _has(children: list[Any], token_type: str) -> bool:
    return any(isinstance(c, Token) and c.type == token_type for c in children)


def _nodes(children: list[Any]) -> list[Any]:
    return [c for c in children if not isinstance(c, Token)]


@v_args(meta=True)
class LangiumTransformer(Transformer):
    """
    Transforms a Lark parse tree for a Langium grammar into ``ast`` nodes.

    The source text is kept so terminal rule bodies can be stored verbatim.
    """

    def __init__(self, text: str) -> None:
        super().__init__()
        self._text = text

    # ---- Position helpers ----

    @staticmethod
    def _range(meta: Meta) -> Range:
        if meta.empty:
            return NO_RANGE
        return Range(
            start=Position(meta.line - 1, meta.column - 1),
            end=Position(meta.end_line - 1, meta.end_column - 1),
        )

    # ---- Grammar ----

    def start(self, meta: Meta, children: list[Any]) -> Grammar:
        header: _Header | None = None
        imports: list[GrammarImport] = []
        declarations = []
        for child in children:
            if isinstance(child, _Header):
                header = child
            elif isinstance(child, GrammarImport):
                imports.append(child)
            else:
                declarations.append(child)
        return Grammar(
            name=header.name if header else None,
            used_grammars=header.used_grammars if header else (),
            imports=tuple(imports),
            declarations=tuple(declarations),
            range=self._range(meta),
        )

    def header(self, meta: Meta, children: list[Any]) -> _Header:
        used = next((c.names for c in children if isinstance(c, _Names)), ())
        return _Header(name=_name(_tokens(children, "ID")[0]), used_grammars=used)

    def with_clause(self, meta: Meta, children: list[Any]) -> _Names:
        return _Names(tuple(_name(t) for t in children))

    def import_decl(self, meta: Meta, children: list[Any]) -> GrammarImport:
        aliases = _tokens(children, "ID")
        return GrammarImport(
            path=_unquote(_tokens(children, "STRING")[0]),
            alias=_name(aliases[0]) if aliases else None,
            range=self._range(meta),
        )

    # ---- Parser rules ----

    def parser_rule(self, meta: Meta, children: list[Any]) -> ParserRule:
        params = next((c.names for c in children if isinstance(c, _Names)), ())
        returns = next((c for c in children if isinstance(c, _Returns)), None)
        definition = [
            c for c in _nodes(children) if not isinstance(c, (_Names, _Returns))
        ][-1]
        return ParserRule(
            name=_name(_tokens(children, "ID")[0]),
            definition=definition,
            entry=_has(children, "ENTRY"),
            fragment=_has(children, "FRAGMENT"),
            parameters=params,
            returns_type=returns.type_name if returns else None,
            infers_type=returns.inferred if returns else False,
            range=self._range(meta),
        )

    def rule_params(self, meta: Meta, children: list[Any]) -> _Names:
        return _Names(tuple(_name(t) for t in children))

    def rule_returns(self, meta: Meta, children: list[Any]) -> _Returns:
        return _Returns(
            type_name=_name(_tokens(children, "ID")[0]),
            inferred=_has(children, "INFERS"),
        )

    def alternatives(self, meta: Meta, children: list[Any]) -> Any:
        if len(children) == 1:
            return children[0]
        return Alternatives(elements=tuple(children), range=self._range(meta))

    def unordered_group(self, meta: Meta, children: list[Any]) -> Any:
        if len(children) == 1:
            return children[0]
        return UnorderedGroup(elements=tuple(children), range=self._range(meta))

    def group(self, meta: Meta, children: list[Any]) -> Any:
        if len(children) == 1:
            return children[0]
        return Group(elements=tuple(children), range=self._range(meta))

    def element(self, meta: Meta, children: list[Any]) -> Any:
        node = _nodes(children)[0]
        cardinality = _tokens(children, "CARDINALITY")
        if cardinality:
            node = dataclasses.replace(node, cardinality=str(cardinality[0]))
        return node

    def paren_group(self, meta: Meta, children: list[Any]) -> Any:
        return children[0]

    def assignment(self, meta: Meta, children: list[Any]) -> Assignment:
        feature, operator = children[0], children[1]
        return Assignment(
            feature=_name(feature),
            operator=str(operator),
            terminal=children[2],
            range=self._range(meta),
        )

    def assignable_alternatives(self, meta: Meta, children: list[Any]) -> Any:
        if len(children) == 1:
            return children[0]
        return Alternatives(elements=tuple(children), range=self._range(meta))

    def cross_reference(self, meta: Meta, children: list[Any]) -> CrossReference:
        terminal = _nodes(children)
        return CrossReference(
            type=_name(children[0]),
            terminal=terminal[0] if terminal else None,
            range=self._range(meta),
        )

    def rule_call(self, meta: Meta, children: list[Any]) -> RuleCall:
        args = next((c.names for c in children if isinstance(c, _Names)), ())
        return RuleCall(rule=_name(children[0]), arguments=args, range=self._range(meta))

    def call_args(self, meta: Meta, children: list[Any]) -> _Names:
        return _Names(tuple(children))

    def call_arg(self, meta: Meta, children: list[Any]) -> str:
        return _name(children[-1])

    def action(self, meta: Meta, children: list[Any]) -> Action:
        ids = _tokens(children, "ID")
        operator = _tokens(children, "ASSIGN_OP")
        return Action(
            type=_name(ids[0]),
            feature=_name(ids[1]) if len(ids) > 1 else None,
            operator=str(operator[0]) if operator else None,
            infer=_has(children, "INFER"),
            range=self._range(meta),
        )

    def keyword(self, meta: Meta, children: list[Any]) -> Keyword:
        return Keyword(value=_unquote(children[0]), range=self._range(meta))

    # ---- Terminal rules ----

    def terminal_rule(self, meta: Meta, children: list[Any]) -> TerminalRule:
        returns = next((c for c in children if isinstance(c, _Returns)), None)
        body = next(c for c in children if isinstance(c, str) and not isinstance(c, Token))
        return TerminalRule(
            name=_name(_tokens(children, "ID")[0]),
            definition=body,
            hidden=_has(children, "HIDDEN"),
            fragment=_has(children, "FRAGMENT"),
            returns_type=returns.type_name if returns else None,
            range=self._range(meta),
        )

    def terminal_returns(self, meta: Meta, children: list[Any]) -> _Returns:
        return _Returns(type_name=_name(_tokens(children, "ID")[0]), inferred=False)

    def terminal_body(self, meta: Meta, children: list[Any]) -> str:
        return self._text[meta.start_pos : meta.end_pos].strip()

    # ---- Interfaces and types ----

    def interface_decl(self, meta: Meta, children: list[Any]) -> InterfaceDecl:
        extends = next((c.names for c in children if isinstance(c, _Names)), ())
        return InterfaceDecl(
            name=_name(children[0]),
            attributes=tuple(c for c in children if isinstance(c, TypeAttribute)),
            super_types=extends,
            range=self._range(meta),
        )

    def extends_clause(self, meta: Meta, children: list[Any]) -> _Names:
        return _Names(tuple(_name(t) for t in children))

    def required_attribute(self, meta: Meta, children: list[Any]) -> TypeAttribute:
        return TypeAttribute(
            name=_name(children[0]), type=children[1], optional=False, range=self._range(meta)
        )

    def optional_attribute(self, meta: Meta, children: list[Any]) -> TypeAttribute:
        return TypeAttribute(
            name=_name(children[0]), type=children[1], optional=True, range=self._range(meta)
        )

    def type_decl(self, meta: Meta, children: list[Any]) -> TypeDecl:
        return TypeDecl(name=_name(children[0]), type=children[1], range=self._range(meta))

    def union_type(self, meta: Meta, children: list[Any]) -> UnionType:
        return UnionType(types=tuple(children), range=self._range(meta))

    def array_type_of(self, meta: Meta, children: list[Any]) -> ArrayType:
        return ArrayType(element_type=children[0], range=self._range(meta))

    def simple_type(self, meta: Meta, children: list[Any]) -> SimpleType:
        name = _name(children[0])
        if name in PRIMITIVE_TYPES:
            return SimpleType(primitive=name, range=self._range(meta))
        return SimpleType(type_ref=name, range=self._range(meta))

    def reference_type(self, meta: Meta, children: list[Any]) -> ReferenceType:
        return ReferenceType(ref_text=f"@{_name(children[0])}", range=self._range(meta))

    def literal_type(self, meta: Meta, children: list[Any]) -> SimpleType:
        return SimpleType(string_literal=_unquote(children[0]), range=self._range(meta))
