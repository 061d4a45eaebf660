"""
Project name derivation.

Turns a grammar file name (or URI) into an identifier that is safe to use as a
package, directory or extension name.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

DEFAULT_PROJECT_NAME = "grammar"

_INVALID_RUN = re.compile(r"[^a-z0-9-]+")
_DASHES = re.compile(r"-{2,}")


def sanitize_project_name(base_name: str) -> str:
    """
    Lower-case ``base_name`` and reduce it to ``[a-z0-9-]``.

    Every run of other characters becomes a single ``-``, repeated dashes are
    collapsed and leading/trailing dashes are removed. Never fails; the result
    may be empty.

    Examples:
        >>> sanitize_project_name("State Machine")
        'state-machine'
        >>> sanitize_project_name("__My_DSL__")
        'my-dsl'
    """
    name = _INVALID_RUN.sub("-", base_name.lower())
    name = _DASHES.sub("-", name)
    return name.strip("-")


def project_name_from_path(path: Path | str) -> str:
    """Project name for a grammar file: its sanitized stem."""
    return sanitize_project_name(Path(path).stem) or DEFAULT_PROJECT_NAME


def project_name_from_uri(uri: str) -> str:
    """
    Project name for a document URI.

    Uses the stem of the last path segment, or the host for URIs such as
    ``memory://inline.langium`` that carry the name there.
    """
    parsed = urlparse(uri)
    segment = PurePosixPath(unquote(parsed.path)).name or parsed.netloc
    stem = PurePosixPath(segment).stem if segment else ""
    return sanitize_project_name(stem) or DEFAULT_PROJECT_NAME
