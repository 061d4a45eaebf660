"""
glspgen command line interface.

Commands:
  inspect   Parse a grammar and print the normalized model
  validate  Report grammar diagnostics
"""

from __future__ import annotations

import dataclasses
import logging
import platform
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from ._version import get_version
from .core.config import load_config
from .core.errors import GrammarError, GrammarFileNotFound
from .core.ir import Interface, ParsedGrammar
from .core.parser import GrammarParser

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

STYLES = {
    "title": "bold bright_cyan",
    "interface": "bold green",
    "type": "bold magenta",
    "property": "white",
    "muted": "bright_black",
    "unknown": "bold yellow",
}


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"glspgen version {get_version()}")
        typer.echo(
            f"Python {platform.python_implementation()} {platform.python_version()}"
        )
        raise typer.Exit()


app = typer.Typer(
    help="glspgen - normalize Langium grammars into a typed model",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """glspgen CLI main callback for global options."""
    pass


# =============================================================================
# Rendering
# =============================================================================


def _property_labels(interface: Interface) -> list[Text]:
    labels = []
    for prop in interface.properties:
        label = Text(prop.name, style=STYLES["property"])
        if prop.optional:
            label.append("?")
        label.append(": ")
        type_text = ("@" if prop.reference else "") + prop.type + ("[]" if prop.array else "")
        label.append(type_text, style=STYLES["unknown"] if prop.is_unknown else "cyan")
        labels.append(label)
    return labels


def render_tree(model: ParsedGrammar) -> Tree:
    """Build a Rich tree of interfaces and types."""
    tree = Tree(Text(model.project_name, style=STYLES["title"]))

    interfaces = tree.add(Text(f"interfaces ({len(model.interfaces)})", style=STYLES["muted"]))
    for interface in model.interfaces:
        label = Text(interface.name, style=STYLES["interface"])
        if interface.super_types:
            label.append(f" extends {', '.join(interface.super_types)}", style=STYLES["muted"])
        node = interfaces.add(label)
        for prop_label in _property_labels(interface):
            node.add(prop_label)

    types = tree.add(Text(f"types ({len(model.types)})", style=STYLES["muted"]))
    for type_alias in model.types:
        label = Text(type_alias.name, style=STYLES["type"])
        label.append(f" = {type_alias.definition}")
        types.add(label)
    return tree


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT, stream=sys.stderr)


# =============================================================================
# Commands
# =============================================================================


@app.command("inspect")
def inspect_command(
    grammar: Path = typer.Argument(..., help="Path to a .langium grammar"),
    format: str = typer.Option("tree", "--format", "-f", help="Output format: 'tree' or 'json'"),
    validate_refs: bool = typer.Option(
        False, "--validate", help="Fail on unresolved references and other validation errors"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to glspgen.toml"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Parse a grammar and print its normalized model.
    """
    _configure_logging(verbose)
    if format not in ("tree", "json"):
        typer.echo(f"Error: unknown format '{format}' (expected 'tree' or 'json')", err=True)
        raise typer.Exit(code=2)

    try:
        settings = load_config(config)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    options = settings.parse
    if validate_refs:
        options = dataclasses.replace(options, validate_references=True)

    parser = GrammarParser(settings=settings.cache)
    try:
        model = parser.parse(grammar, options)
    except GrammarFileNotFound as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except GrammarError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)

    if format == "json":
        typer.echo(model.model_dump_json(by_alias=True, indent=2))
    else:
        Console().print(render_tree(model))


@app.command("validate")
def validate_command(
    grammar: Path = typer.Argument(..., help="Path to a .langium grammar"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Parse a grammar and report validation errors and warnings.

    Exits with code 1 when the grammar has errors.
    """
    _configure_logging(verbose)
    parser = GrammarParser()
    try:
        issues = parser.diagnostics(grammar)
    except GrammarFileNotFound as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except GrammarError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)

    if issues.errors:
        typer.echo("Validation failed:\n", err=True)
        for issue in issues.errors:
            typer.echo(f"ERROR: {issue.format()}", err=True)

    if issues.warnings:
        typer.echo("Validation warnings:\n")
        for issue in issues.warnings:
            typer.echo(f"WARNING: {issue.format()}")

    if not issues.errors and not issues.warnings:
        typer.echo("OK: grammar is valid.")

    if issues.errors:
        raise typer.Exit(code=1)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
