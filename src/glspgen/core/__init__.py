"""
Core grammar pipeline: load, parse, translate diagnostics, normalize, cache.
"""

from . import ir
from .cache import NullCache, ResultCache, TTLCache
from .config import CacheSettings, GlspgenConfig, ParseOptions, load_config
from .diagnostics import ParseIssue, TranslatedDiagnostics, translate
from .document import parse_document
from .loader import GrammarSource, from_text, load_file
from .names import sanitize_project_name
from .normalizer import NormalizationAnomaly, NormalizedGrammar, normalize
from .parser import GrammarParser, parse, parse_content, validate

__all__ = [
    "ir",
    "CacheSettings",
    "GlspgenConfig",
    "GrammarParser",
    "GrammarSource",
    "NormalizationAnomaly",
    "NormalizedGrammar",
    "NullCache",
    "ParseIssue",
    "ParseOptions",
    "ResultCache",
    "TTLCache",
    "TranslatedDiagnostics",
    "from_text",
    "load_config",
    "load_file",
    "normalize",
    "parse",
    "parse_content",
    "parse_document",
    "sanitize_project_name",
    "translate",
    "validate",
]
