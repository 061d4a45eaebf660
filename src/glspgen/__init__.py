"""
glspgen - grammar model core for GLSP generators.

Parses Langium grammars into a normalized model of interfaces and type
aliases that code, documentation and test generators consume.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.config import ParseOptions
from .core.errors import (
    GrammarError,
    GrammarFileNotFound,
    GrammarSyntaxError,
    LexError,
    SemanticError,
)
from .core.ir import Interface, ParsedGrammar, Property, TypeAlias
from .core.parser import GrammarParser, parse, parse_content, validate

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "GrammarError",
    "GrammarFileNotFound",
    "GrammarParser",
    "GrammarSyntaxError",
    "Interface",
    "LexError",
    "ParseOptions",
    "ParsedGrammar",
    "Property",
    "SemanticError",
    "TypeAlias",
    "parse",
    "parse_content",
    "validate",
]
