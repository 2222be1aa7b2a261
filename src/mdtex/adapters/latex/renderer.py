"""High-level document tree to LaTeX renderer."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import io
from typing import Any

from mdtex.core.config import RenderConfig
from mdtex.core.context import FormattingContext, LinkTarget, TextSink
from mdtex.core.diagnostics import DiagnosticEmitter, NullEmitter
from mdtex.core.document import BLOCK_TYPES, SPAN_TYPES, Block
from mdtex.core.rules import RenderEngine


class LaTeXRenderer:
    """Render document trees to LaTeX using the registered node rules."""

    def __init__(
        self,
        config: RenderConfig | None = None,
        diagnostics: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config or RenderConfig()
        self.diagnostics = diagnostics or NullEmitter()
        self.engine = RenderEngine()
        self._register_builtin_handlers()
        self.engine.ensure_complete(SPAN_TYPES + BLOCK_TYPES)

    def _register_builtin_handlers(self) -> None:
        """Register the span and block rules shipped with the package."""
        from ..handlers import blocks as block_handlers, inline as inline_handlers

        self.engine.collect_from(inline_handlers)
        self.engine.collect_from(block_handlers)

    def register(self, handler: Any) -> None:
        """Register additional handlers on demand.

        Arguments can be callables decorated with :func:`renders` or modules
        exposing decorated attributes. Rules with a lower priority than the
        built-in ones take precedence for their node types.
        """
        definition = getattr(handler, "__render_rule__", None)
        if definition is not None:
            self.engine.register(handler)
            return

        self.engine.collect_from(handler)

    def create_context(
        self,
        writer: TextSink,
        links: Mapping[str, LinkTarget] | None = None,
    ) -> FormattingContext:
        """Build the top-level context; its break policy starts as a no-op."""
        return FormattingContext(
            writer=writer,
            engine=self.engine,
            newline=self.config.newline,
            links=dict(links or {}),
            generate_line_numbers=self.config.generate_line_numbers,
            define_symbol=self.config.define_symbol,
            script_language=self.config.script_language,
            legacy_latex_accents=self.config.legacy_latex_accents,
            strict_references=self.config.strict_references,
            diagnostics=self.diagnostics,
        )

    def write(
        self,
        writer: TextSink,
        blocks: Iterable[Block],
        links: Mapping[str, LinkTarget] | None = None,
    ) -> None:
        """Render ``blocks`` into ``writer``."""
        blocks = list(blocks)
        self.diagnostics.event(
            "render_start",
            {"blocks": len(blocks), "line_numbers": self.config.generate_line_numbers},
        )
        context = self.create_context(writer, links)
        context.render_blocks(blocks)
        self.diagnostics.event("render_complete", {"blocks": len(blocks)})

    def render(
        self,
        blocks: Iterable[Block],
        links: Mapping[str, LinkTarget] | None = None,
    ) -> str:
        """Render ``blocks`` and return the LaTeX text."""
        buffer = io.StringIO()
        self.write(buffer, blocks, links)
        return buffer.getvalue()


__all__ = ["LaTeXRenderer"]
