"""
Public grammar parsing API.

Loads a grammar, builds the engine document, checks diagnostics and
normalizes the AST into a ``ParsedGrammar``. Results are cached by source
fingerprint.

Usage::

    from glspgen.core.parser import parse, parse_content

    grammar = parse("statemachine.langium")
    grammar = parse_content("type Shape = 'circle' | 'square'")
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from .cache import GrammarCache, NullCache, ResultCache, content_key, model_key
from .config import CacheSettings, ParseOptions
from .diagnostics import TranslatedDiagnostics, translate
from .document import file_label, parse_document
from .engine import Document, DocumentBuilder
from .errors import GrammarError
from .ir import ParsedGrammar
from .loader import DEFAULT_URI, from_text, load_file, resolve_path
from .names import project_name_from_path, project_name_from_uri
from .normalizer import normalize

logger = logging.getLogger(__name__)


class GrammarParser:
    """
    Parses grammars into normalized models.

    Args:
        cache: Result cache (default: ResultCache built from ``settings``;
            NullCache when caching is disabled there)
        builder: Engine document builder (default: shared builder)
        settings: Cache settings used when no cache is given
    """

    def __init__(
        self,
        cache: GrammarCache | None = None,
        builder: DocumentBuilder | None = None,
        settings: CacheSettings | None = None,
    ) -> None:
        if cache is None:
            settings = settings or CacheSettings()
            cache = ResultCache(settings) if settings.enabled else NullCache()
        self.cache = cache
        self.builder = builder

    def parse(self, path: Path | str, options: ParseOptions | None = None) -> ParsedGrammar:
        """
        Parse a grammar file.

        Args:
            path: Grammar file path
            options: Parse options (default: ParseOptions())

        Returns:
            ParsedGrammar

        Raises:
            GrammarFileNotFound: If the file cannot be read
            LexError: If the grammar cannot be tokenized
            GrammarSyntaxError: If the grammar is malformed
            SemanticError: If validation fails and validate_references is set
        """
        options = options or ParseOptions()
        source = load_file(path)
        key = model_key(str(source.path), source.fingerprint, options.validate_references)

        if options.use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        logger.debug(f"Parsing grammar file {source.path}")
        document = parse_document(source.text, source.uri, self.builder)
        model = self._build_model(
            document, source.path, project_name_from_path(source.path), options
        )

        if options.use_cache:
            self.cache.set(key, model)
        return model

    def parse_content(
        self,
        text: str,
        uri: str = DEFAULT_URI,
        options: ParseOptions | None = None,
    ) -> ParsedGrammar:
        """
        Parse grammar text supplied directly.

        Args:
            text: Grammar source
            uri: Document URI; its file name stem becomes the project name
            options: Parse options (default: ParseOptions())

        Returns:
            ParsedGrammar

        Raises:
            LexError, GrammarSyntaxError, SemanticError: As for ``parse``
        """
        options = options or ParseOptions()
        source = from_text(text, uri)
        key = content_key(uri, source.fingerprint, options.validate_references)

        if options.use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        document_key = content_key(uri, source.fingerprint)
        document = self.cache.get_document(document_key) if options.use_cache else None
        if document is None:
            logger.debug(f"Parsing grammar content {uri}")
            document = parse_document(text, uri, self.builder)
            if options.use_cache:
                self.cache.set_document(document_key, document)

        model = self._build_model(document, file_label(uri), project_name_from_uri(uri), options)

        if options.use_cache:
            self.cache.set(key, model)
        return model

    def validate(self, path: Path | str) -> bool:
        """
        Check that a grammar parses and has no validation errors.

        Returns:
            True if valid, False on any grammar error
        """
        try:
            self.parse(path, ParseOptions(validate_references=True))
        except GrammarError as e:
            logger.debug(f"Grammar {path} is invalid: {e}")
            return False
        return True

    def diagnostics(self, path: Path | str) -> TranslatedDiagnostics:
        """
        Validation errors and warnings for a grammar file.

        Raises:
            GrammarFileNotFound, LexError, GrammarSyntaxError: On fatal errors
        """
        source = load_file(path)
        document = parse_document(source.text, source.uri, self.builder)
        return translate(document.diagnostics, source.path)

    def invalidate(self, path: Path | str) -> int:
        """Drop every cached result for a grammar file."""
        return self.cache.invalidate_prefix(f"grammar:{resolve_path(path)}:")

    def clear_cache(self) -> None:
        self.cache.clear()

    # =========================================================================
    # Model building
    # =========================================================================

    def _build_model(
        self,
        document: Document,
        file: Path | str,
        project_name: str,
        options: ParseOptions,
    ) -> ParsedGrammar:
        issues = translate(document.diagnostics, file)
        for warning in issues.warnings:
            logger.warning(warning.format())

        if issues.errors:
            if options.validate_references:
                error = issues.errors[0]
                logger.error(f"Validation failed: {error.format()}")
                raise error.to_error()
            logger.debug(
                f"{len(issues.errors)} validation error(s) in {file} ignored "
                "(validate_references is off)"
            )

        grammar = document.grammar
        if options.resolve_imports:
            for grammar_import in grammar.imports:
                logger.debug(f"{file} imports '{grammar_import.path}' (not loaded)")

        normalized = normalize(grammar)
        model = ParsedGrammar(
            project_name=project_name,
            interfaces=tuple(normalized.interfaces),
            types=tuple(normalized.types),
        )
        logger.info(
            f"Parsed {file}: {len(model.interfaces)} interfaces, {len(model.types)} types"
            + (f", {len(normalized.anomalies)} unknown" if normalized.anomalies else "")
        )
        return model


# =============================================================================
# Module-level API
# =============================================================================

_default_parser: GrammarParser | None = None
_default_parser_lock = threading.Lock()


def get_default_parser() -> GrammarParser:
    """Process-wide parser used by the module-level functions."""
    global _default_parser
    with _default_parser_lock:
        if _default_parser is None:
            _default_parser = GrammarParser()
        return _default_parser


def parse(path: Path | str, options: ParseOptions | None = None) -> ParsedGrammar:
    """Parse a grammar file with the default parser."""
    return get_default_parser().parse(path, options)


def parse_content(
    text: str, uri: str = DEFAULT_URI, options: ParseOptions | None = None
) -> ParsedGrammar:
    """Parse grammar text with the default parser."""
    return get_default_parser().parse_content(text, uri, options)


def validate(path: Path | str) -> bool:
    """Check a grammar file with the default parser."""
    return get_default_parser().validate(path)
