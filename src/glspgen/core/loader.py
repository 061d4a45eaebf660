"""
Grammar source loading.

Reads grammar text from disk or wraps caller-supplied text, and computes the
fingerprint used in cache keys.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import GrammarFileNotFound, LexError, make_lex_error

logger = logging.getLogger(__name__)

DEFAULT_URI = "memory://inline.langium"


@dataclass(frozen=True)
class GrammarSource:
    """
    Grammar text plus where it came from.

    Attributes:
        text: Grammar source text
        uri: ``file://`` URI for files, caller-chosen URI for strings
        fingerprint: Changes whenever the source changes
        path: Absolute path for file sources, None for strings
    """

    text: str
    uri: str
    fingerprint: str
    path: Path | None = None


def file_fingerprint(path: Path) -> str:
    """Modification time and size, e.g. ``"1700000000000000000-1234"``."""
    stat = path.stat()
    return f"{stat.st_mtime_ns}-{stat.st_size}"


def content_fingerprint(text: str) -> str:
    """First 16 hex digits of the SHA-256 of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


def resolve_path(path: Path | str) -> Path:
    return Path(path).expanduser().resolve()


def _decode_error(path: Path, data: bytes, e: UnicodeDecodeError) -> LexError:
    """LexError at the first byte that is not valid UTF-8."""
    before = data[: e.start]
    line = before.count(b"\n") + 1
    line_start = before.rfind(b"\n") + 1
    column = len(before[line_start:].decode("utf-8", errors="replace")) + 1
    return make_lex_error(
        f"Invalid UTF-8 byte 0x{data[e.start]:02x}", path, line, column
    )


def load_file(path: Path | str) -> GrammarSource:
    """
    Read a grammar file.

    Raises:
        GrammarFileNotFound: If the file is missing, a directory or unreadable
        LexError: If the file is not valid UTF-8
    """
    resolved = resolve_path(path)
    if not resolved.exists():
        raise GrammarFileNotFound(resolved)
    if not resolved.is_file():
        raise GrammarFileNotFound(resolved, "not a file")
    try:
        data = resolved.read_bytes()
        fingerprint = file_fingerprint(resolved)
    except OSError as e:
        raise GrammarFileNotFound(resolved, str(e)) from e

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise _decode_error(resolved, data, e) from e

    logger.debug(f"Loaded {resolved} ({len(text)} chars, fingerprint {fingerprint})")
    return GrammarSource(
        text=text, uri=resolved.as_uri(), fingerprint=fingerprint, path=resolved
    )


def from_text(text: str, uri: str = DEFAULT_URI) -> GrammarSource:
    """Wrap grammar text supplied directly by the caller."""
    return GrammarSource(text=text, uri=uri, fingerprint=content_fingerprint(text))
