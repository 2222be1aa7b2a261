"""Entry points rendering a document tree to LaTeX."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import io

from mdtex.adapters.latex.renderer import LaTeXRenderer
from mdtex.core.config import RenderConfig
from mdtex.core.context import LinkTarget, TextSink
from mdtex.core.diagnostics import DiagnosticEmitter
from mdtex.core.document import Block
from mdtex.core.substitutions import (
    CodeReferenceResolver,
    LinkResolver,
    SubstitutionContext,
    apply_substitutions,
    no_code_references,
    no_link_rewrites,
)


def _coerce_links(links: Mapping[str, object] | None) -> dict[str, LinkTarget]:
    coerced: dict[str, LinkTarget] = {}
    for key, value in (links or {}).items():
        if isinstance(value, LinkTarget):
            coerced[key] = value
        elif isinstance(value, str):
            coerced[key] = LinkTarget(value)
        else:
            url, title = value  # type: ignore[misc]
            coerced[key] = LinkTarget(url, title)
    return coerced


def render_document(
    writer: TextSink,
    links: Mapping[str, LinkTarget | tuple[str, str | None]] | None,
    substitutions: Iterable[tuple[str, str]] | Mapping[str, str] | None,
    newline: str,
    code_reference_resolver: CodeReferenceResolver | None,
    link_resolver: LinkResolver | None,
    generate_line_numbers: bool,
    blocks: Iterable[Block],
    *,
    config: RenderConfig | None = None,
    diagnostics: DiagnosticEmitter | None = None,
) -> None:
    """Resolve placeholders in ``blocks`` and write their LaTeX to ``writer``.

    ``config`` supplies the remaining options; the explicit ``newline`` and
    ``generate_line_numbers`` arguments take precedence over it.
    """
    config = (config or RenderConfig()).model_copy(
        update={"newline": newline, "generate_line_numbers": generate_line_numbers}
    )
    label_table = _coerce_links(links)
    if isinstance(substitutions, Mapping):
        substitutions = substitutions.items()

    substitution_context = SubstitutionContext(
        links=label_table,
        substitutions=tuple(substitutions or config.substitutions.items()),
        newline=config.newline,
        code_reference_resolver=code_reference_resolver or no_code_references,
        link_resolver=link_resolver or no_link_rewrites,
        define_symbol=config.define_symbol,
    )
    resolved = apply_substitutions(substitution_context, blocks)

    renderer = LaTeXRenderer(config=config, diagnostics=diagnostics)
    renderer.write(writer, resolved, label_table)


def render_to_string(
    blocks: Iterable[Block],
    links: Mapping[str, LinkTarget | tuple[str, str | None]] | None = None,
    *,
    config: RenderConfig | None = None,
    code_reference_resolver: CodeReferenceResolver | None = None,
    link_resolver: LinkResolver | None = None,
    diagnostics: DiagnosticEmitter | None = None,
) -> str:
    """Render ``blocks`` and return the LaTeX text."""
    config = config or RenderConfig()
    buffer = io.StringIO()
    render_document(
        buffer,
        links,
        config.substitutions,
        config.newline,
        code_reference_resolver,
        link_resolver,
        config.generate_line_numbers,
        blocks,
        config=config,
        diagnostics=diagnostics,
    )
    return buffer.getvalue()


__all__ = ["render_document", "render_to_string"]
