"""Substitution pass run once over the document tree before rendering.

The pass returns a new tree in which:

- placeholder keys from the substitution table are replaced, in order, inside
  literal text, code, raw blocks and link/image targets;
- inline code starting with ``cref:`` is turned into a link when the code
  reference resolver knows the symbol;
- direct link and image targets are rewritten by the document link resolver
  (e.g. ``other.md`` to ``other.html``).

Embedded nodes are kept as-is; their expansion depends on the rendering
context and happens in the renderer. The input tree is never mutated.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
import logging

from .config import DEFAULT_DEFINE_SYMBOL
from .document import (
    Block,
    CodeBlock,
    DirectImage,
    DirectLink,
    Emphasis,
    Heading,
    IndirectLink,
    InlineCode,
    InlineHtmlBlock,
    LatexBlock,
    ListBlock,
    Literal,
    OutputBlock,
    Paragraph,
    QuotedBlock,
    Span,
    SpanBlock,
    Strong,
    TableBlock,
)


logger = logging.getLogger(__name__)

CODE_REFERENCE_PREFIX = "cref:"

CodeReferenceResolver = Callable[[str], tuple[str, str] | None]
"""Maps a ``cref:`` symbol to ``(display text, url)`` or ``None``."""

LinkResolver = Callable[[str], str | None]
"""Maps a document link target to its published URL or ``None``."""


def no_code_references(_reference: str) -> tuple[str, str] | None:
    return None


def no_link_rewrites(_link: str) -> str | None:
    return None


@dataclass(frozen=True, slots=True)
class SubstitutionContext:
    """Inputs of the substitution pass."""

    links: Mapping[str, object] = field(default_factory=dict)
    substitutions: Sequence[tuple[str, str]] = ()
    newline: str = "\n"
    code_reference_resolver: CodeReferenceResolver = no_code_references
    link_resolver: LinkResolver = no_link_rewrites
    define_symbol: str = DEFAULT_DEFINE_SYMBOL

    def substitute(self, text: str) -> str:
        for key, value in self.substitutions:
            text = text.replace(key, value)
        return text

    def resolve_link(self, link: str) -> str:
        link = self.substitute(link)
        resolved = self.link_resolver(link)
        if resolved is None:
            return link
        logger.debug("Rewrote document link %s -> %s", link, resolved)
        return resolved


def _map_spans(context: SubstitutionContext, spans: Iterable[Span]) -> tuple[Span, ...]:
    return tuple(_map_span(context, span) for span in spans)


def _map_span(context: SubstitutionContext, span: Span) -> Span:
    if isinstance(span, Literal):
        return replace(span, text=context.substitute(span.text))
    if isinstance(span, InlineCode):
        code = context.substitute(span.code)
        if code.startswith(CODE_REFERENCE_PREFIX):
            resolved = context.code_reference_resolver(code[len(CODE_REFERENCE_PREFIX) :])
            if resolved is not None:
                text, url = resolved
                return DirectLink(body=(InlineCode(text, span.range),), link=url, range=span.range)
            logger.debug("Unresolved code reference %s", code)
        return replace(span, code=code)
    if isinstance(span, (Strong, Emphasis, IndirectLink)):
        return replace(span, body=_map_spans(context, span.body))
    if isinstance(span, DirectLink):
        return replace(
            span,
            body=_map_spans(context, span.body),
            link=context.resolve_link(span.link),
        )
    if isinstance(span, DirectImage):
        return replace(span, link=context.resolve_link(span.link))
    return span


def _map_blocks(context: SubstitutionContext, blocks: Iterable[Block]) -> tuple[Block, ...]:
    return tuple(_map_block(context, block) for block in blocks)


def _map_block(context: SubstitutionContext, block: Block) -> Block:
    if isinstance(block, (Heading, Paragraph, SpanBlock)):
        return replace(block, body=_map_spans(context, block.body))
    if isinstance(block, CodeBlock):
        return replace(block, code=context.substitute(block.code))
    if isinstance(block, OutputBlock):
        return replace(block, output=context.substitute(block.output))
    if isinstance(block, InlineHtmlBlock):
        return replace(block, code=context.substitute(block.code))
    if isinstance(block, LatexBlock):
        return replace(block, lines=tuple(context.substitute(line) for line in block.lines))
    if isinstance(block, QuotedBlock):
        return replace(block, body=_map_blocks(context, block.body))
    if isinstance(block, ListBlock):
        return replace(block, items=tuple(_map_blocks(context, item) for item in block.items))
    if isinstance(block, TableBlock):
        headers = (
            None
            if block.headers is None
            else tuple(_map_blocks(context, cell) for cell in block.headers)
        )
        rows = tuple(tuple(_map_blocks(context, cell) for cell in row) for row in block.rows)
        return replace(block, headers=headers, rows=rows)
    return block


def apply_substitutions(
    context: SubstitutionContext, blocks: Iterable[Block]
) -> tuple[Block, ...]:
    """Return ``blocks`` with placeholders and references resolved."""
    return _map_blocks(context, blocks)


__all__ = [
    "CODE_REFERENCE_PREFIX",
    "CodeReferenceResolver",
    "LinkResolver",
    "SubstitutionContext",
    "apply_substitutions",
    "no_code_references",
    "no_link_rewrites",
]
