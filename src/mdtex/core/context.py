"""Formatting context threaded through every render rule.

The context is an immutable value. Regions that need a different break policy
(table cells, block sequences) derive a copy with :meth:`with_no_break` or
:meth:`with_small_break` instead of mutating the parent, so a suppressed
policy never leaks into a sibling block.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, NamedTuple, Protocol

from .config import DEFAULT_DEFINE_SYMBOL
from .diagnostics import DiagnosticEmitter, NullEmitter


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .document import Block, Span
    from .rules import RenderEngine


class TextSink(Protocol):
    """Output sink receiving sequential text writes."""

    def write(self, text: str, /) -> object: ...


class LinkTarget(NamedTuple):
    """Resolved target of a link label."""

    url: str
    title: str | None = None


LineBreak = Callable[[], None]


def no_break() -> None:
    """Break policy that writes nothing."""
    return None


@dataclass(frozen=True, slots=True)
class FormattingContext:
    """Output sink, break policy, label table and options of a rendering pass."""

    writer: TextSink
    engine: RenderEngine
    newline: str = "\n"
    line_break: LineBreak = no_break
    links: Mapping[str, LinkTarget] = field(default_factory=dict)
    generate_line_numbers: bool = False
    define_symbol: str = DEFAULT_DEFINE_SYMBOL
    script_language: str = "fsharp"
    legacy_latex_accents: bool = False
    strict_references: bool = False
    diagnostics: DiagnosticEmitter = field(default_factory=NullEmitter)

    def write(self, text: str) -> None:
        self.writer.write(text)

    def small_break(self) -> None:
        """Write a single newline to the sink."""
        self.writer.write(self.newline)

    def with_small_break(self) -> FormattingContext:
        """Return a copy whose break policy writes one newline."""
        return replace(self, line_break=self.small_break)

    def with_no_break(self) -> FormattingContext:
        """Return a copy whose break policy writes nothing."""
        return replace(self, line_break=no_break)

    def render_span(self, span: Span) -> None:
        self.engine.dispatch(span, self)

    def render_spans(self, spans: Iterable[Span]) -> None:
        for span in spans:
            self.engine.dispatch(span, self)

    def render_block(self, block: Block) -> None:
        """Render one block followed by the uniform block separator."""
        self.engine.dispatch(block, self)
        self.line_break()

    def render_blocks(self, blocks: Iterable[Block]) -> None:
        """Render a block sequence under the standard single-newline policy."""
        blocks = list(blocks)
        context = self.with_small_break()
        length = len(blocks)
        for index, block in enumerate(blocks):
            # Reserved for position-dependent rules; every block currently shares one policy.
            _last = index == length - 1
            context.render_block(block)


__all__ = ["FormattingContext", "LineBreak", "LinkTarget", "TextSink", "no_break"]
