"""
Grammar engine for the Langium grammar language.

Lark grammar + transformer produce the AST in ``ast``; ``DocumentBuilder``
wraps both and runs the validation pass.
"""

from . import ast
from .builder import Diagnostic, DiagnosticSeverity, Document, DocumentBuilder, get_parser
from .validator import BUILTIN_TERMINALS, GrammarValidator

__all__ = [
    "ast",
    "BUILTIN_TERMINALS",
    "Diagnostic",
    "DiagnosticSeverity",
    "Document",
    "DocumentBuilder",
    "GrammarValidator",
    "get_parser",
]
