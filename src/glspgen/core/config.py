"""
Configuration for grammar parsing.

Options are passed explicitly to the parser; nothing is read from globals or
the environment. ``load_config`` reads an optional ``glspgen.toml``::

    [parse]
    validate_references = true

    [cache]
    model_ttl = 600
    enabled = false
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "glspgen.toml"


@dataclass(frozen=True)
class ParseOptions:
    """
    Per-call parse options.

    Attributes:
        use_cache: Look up and store results in the cache
        validate_references: Raise SemanticError on validation errors
        resolve_imports: Report grammar imports (they are not loaded)
    """

    use_cache: bool = True
    validate_references: bool = False
    resolve_imports: bool = False


@dataclass(frozen=True)
class CacheSettings:
    """Result cache settings. TTLs are in seconds."""

    model_ttl: float = 3600.0
    document_ttl: float = 1800.0
    max_entries: int = 50
    enabled: bool = True


@dataclass(frozen=True)
class GlspgenConfig:
    parse: ParseOptions = field(default_factory=ParseOptions)
    cache: CacheSettings = field(default_factory=CacheSettings)


def _known_keys(cls: type, table: dict[str, Any], section: str) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = set(table) - names
    if unknown:
        logger.debug(f"Ignoring unknown [{section}] keys: {', '.join(sorted(unknown))}")
    return {k: v for k, v in table.items() if k in names}


def load_config(path: Path | str | None = None) -> GlspgenConfig:
    """
    Load configuration from a TOML file.

    Args:
        path: Config file (default: ``glspgen.toml`` in the working directory)

    Returns:
        GlspgenConfig; defaults when the file does not exist

    Raises:
        ValueError: If the file is not valid TOML
    """
    config_path = Path(path) if path is not None else Path.cwd() / CONFIG_FILENAME
    if not config_path.exists():
        return GlspgenConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e

    parse_table = data.get("parse", {})
    cache_table = data.get("cache", {})
    return GlspgenConfig(
        parse=ParseOptions(**_known_keys(ParseOptions, parse_table, "parse")),
        cache=CacheSettings(**_known_keys(CacheSettings, cache_table, "cache")),
    )
