"""
glspgen Intermediate Representation (IR) types.

The normalized grammar model shared by every generator.
"""

from .grammar import (
    PRIMITIVE_TYPES,
    UNKNOWN_TYPE,
    Interface,
    ParsedGrammar,
    Property,
    TypeAlias,
)

__all__ = [
    "PRIMITIVE_TYPES",
    "UNKNOWN_TYPE",
    "Interface",
    "ParsedGrammar",
    "Property",
    "TypeAlias",
]
