"""Render command converting a serialised document tree into LaTeX."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import ValidationError
import typer

from mdtex.api import render_to_string
from mdtex.core.config import RenderConfig
from mdtex.core.exceptions import DocumentLoadError, LatexRenderingError, exception_hint
from mdtex.core.serialization import load_tree_file

from ..diagnostics import CliEmitter
from ..state import debug_enabled, emit_error, set_cli_state


def parse_substitutions(values: list[str] | None) -> dict[str, str]:
    """Parse ``KEY=VALUE`` pairs given on the command line."""
    substitutions: dict[str, str] = {}
    for value in values or ():
        key, separator, replacement = value.partition("=")
        if not separator or not key:
            raise typer.BadParameter(
                f"Expected KEY=VALUE, got '{value}'", param_hint="--substitution"
            )
        substitutions[key] = replacement
    return substitutions


def build_config(
    config_path: Path | None,
    *,
    overrides: dict[str, Any],
    substitutions: dict[str, str],
) -> RenderConfig:
    """Merge the optional config file with command-line overrides."""
    base = RenderConfig.from_file(config_path) if config_path else RenderConfig()
    payload = base.model_dump()
    payload.update({key: value for key, value in overrides.items() if value is not None})
    payload["substitutions"] = {**base.substitutions, **substitutions}
    return RenderConfig.model_validate(payload)


def render(
    ctx: typer.Context,
    tree: Annotated[
        Path,
        typer.Argument(
            help="JSON or YAML document tree to render.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write LaTeX to this file instead of stdout."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="YAML file with rendering options.", exists=True),
    ] = None,
    line_numbers: Annotated[
        bool | None,
        typer.Option("--line-numbers/--no-line-numbers", help="Number lstlisting lines."),
    ] = None,
    newline: Annotated[
        str | None,
        typer.Option("--newline", help="Line separator: 'lf' or 'crlf'."),
    ] = None,
    substitution: Annotated[
        list[str] | None,
        typer.Option("--substitution", "-s", help="Placeholder replacement as KEY=VALUE."),
    ] = None,
    legacy_accents: Annotated[
        bool | None,
        typer.Option(
            "--legacy-accents/--unicode-accents",
            help="Escape accented characters with legacy LaTeX macros.",
        ),
    ] = None,
    strict_references: Annotated[
        bool | None,
        typer.Option(
            "--strict-references/--lenient-references",
            help="Fail on link labels missing from the label table.",
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase diagnostic verbosity."),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks on failure."),
    ] = False,
) -> None:
    """Render a document tree to LaTeX."""
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)

    try:
        document = load_tree_file(tree)
        config = build_config(
            config_path,
            overrides={
                "generate_line_numbers": line_numbers,
                "newline": newline,
                "legacy_latex_accents": legacy_accents,
                "strict_references": strict_references,
            },
            substitutions={**document.substitutions, **parse_substitutions(substitution)},
        )
    except (DocumentLoadError, ValidationError, ValueError, OSError) as exc:
        if debug_enabled():
            raise
        emit_error(exception_hint(exc) or str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    emitter = CliEmitter(state=state)
    try:
        latex = render_to_string(
            document.blocks,
            document.links,
            config=config,
            diagnostics=emitter,
        )
    except LatexRenderingError as exc:
        if debug_enabled():
            raise
        emit_error(f"LaTeX rendering failed: {exc}", exception=exc)
        raise typer.Exit(code=1) from exc

    if output is None:
        typer.echo(latex, nl=False)
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(latex, encoding="utf-8", newline="")
    except OSError as exc:
        emit_error(f"Failed to write '{output}': {exc}", exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["build_config", "parse_substitutions", "render"]
