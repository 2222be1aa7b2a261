"""Document tree consumed by the LaTeX renderer.

The tree is produced by an external Markdown parser and is read-only for the
renderer. Two families of nodes exist:

`Spans`
: inline content (text, emphasis, links, images, code, math, breaks).

`Blocks`
: paragraph-level content (headings, paragraphs, lists, tables, quotes,
  code and output blocks, raw LaTeX environments).

Both families are closed unions (:data:`Span` and :data:`Block`). Embedded
nodes (:class:`EmbedSpans`, :class:`EmbedParagraphs`) carry an object exposing
a ``render()`` method; they are expanded lazily while rendering so the stored
tree stays closed and serialisable.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TypeAlias, get_args, runtime_checkable


@dataclass(frozen=True, slots=True)
class SourceRange:
    """Location of a node in the Markdown source."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int


class Alignment(Enum):
    """Column alignment of a table."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    DEFAULT = "default"


class ListKind(Enum):
    """Kind of a Markdown list."""

    ORDERED = "ordered"
    UNORDERED = "unordered"


@runtime_checkable
class EmbeddableSpans(Protocol):
    """Object that expands to inline nodes when rendered."""

    def render(self) -> Sequence[Span]: ...


@runtime_checkable
class EmbeddableParagraphs(Protocol):
    """Object that expands to block nodes when rendered."""

    def render(self) -> Sequence[Block]: ...


# Spans


@dataclass(frozen=True, slots=True)
class Literal:
    text: str
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class InlineCode:
    code: str
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class Strong:
    body: tuple[Span, ...]
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class Emphasis:
    body: tuple[Span, ...]
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class AnchorLink:
    link: str
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class DirectLink:
    body: tuple[Span, ...]
    link: str
    title: str | None = None
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class IndirectLink:
    """Link referencing a label defined elsewhere in the document.

    ``original`` holds the source text of the reference and doubles as the
    target when ``key`` is missing from the label table.
    """

    body: tuple[Span, ...]
    original: str
    key: str
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class DirectImage:
    body: str
    link: str
    title: str | None = None
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class IndirectImage:
    body: str
    original: str
    key: str
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class HardLineBreak:
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class LatexInlineMath:
    code: str
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class LatexDisplayMath:
    code: str
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class EmbedSpans:
    command: EmbeddableSpans
    range: SourceRange | None = None


Span: TypeAlias = (
    Literal
    | InlineCode
    | Strong
    | Emphasis
    | AnchorLink
    | DirectLink
    | IndirectLink
    | DirectImage
    | IndirectImage
    | HardLineBreak
    | LatexInlineMath
    | LatexDisplayMath
    | EmbedSpans
)


# Blocks


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    body: tuple[Span, ...]
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class Paragraph:
    body: tuple[Span, ...]
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class HorizontalRule:
    character: str = "-"
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class CodeBlock:
    code: str
    language: str = ""
    execution_count: int | None = None
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class OutputBlock:
    """Execution output attached to a code block (e.g. notebook results)."""

    output: str
    kind: str = "text/plain"
    execution_count: int | None = None
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class TableBlock:
    """Table whose cells are themselves block sequences."""

    headers: tuple[tuple[Block, ...], ...] | None
    alignments: tuple[Alignment, ...]
    rows: tuple[tuple[tuple[Block, ...], ...], ...]
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class ListBlock:
    kind: ListKind
    items: tuple[tuple[Block, ...], ...]
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class QuotedBlock:
    body: tuple[Block, ...]
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class InlineHtmlBlock:
    code: str
    execution_count: int | None = None
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class LatexBlock:
    """Raw LaTeX environment written through without escaping."""

    env: str
    lines: tuple[str, ...]
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class OtherBlock:
    """Opaque block made of raw text fragments."""

    fragments: tuple[str, ...]
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class EmbedParagraphs:
    command: EmbeddableParagraphs
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class YamlFrontmatter:
    lines: tuple[str, ...]
    range: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class SpanBlock:
    """Bare sequence of spans appearing at block level."""

    body: tuple[Span, ...]
    range: SourceRange | None = None


Block: TypeAlias = (
    Heading
    | Paragraph
    | HorizontalRule
    | CodeBlock
    | OutputBlock
    | TableBlock
    | ListBlock
    | QuotedBlock
    | InlineHtmlBlock
    | LatexBlock
    | OtherBlock
    | EmbedParagraphs
    | YamlFrontmatter
    | SpanBlock
)


SPAN_TYPES: tuple[type, ...] = get_args(Span)
BLOCK_TYPES: tuple[type, ...] = get_args(Block)


__all__ = [
    "BLOCK_TYPES",
    "SPAN_TYPES",
    "Alignment",
    "AnchorLink",
    "Block",
    "CodeBlock",
    "DirectImage",
    "DirectLink",
    "EmbedParagraphs",
    "EmbedSpans",
    "EmbeddableParagraphs",
    "EmbeddableSpans",
    "Emphasis",
    "HardLineBreak",
    "Heading",
    "HorizontalRule",
    "IndirectImage",
    "IndirectLink",
    "InlineCode",
    "InlineHtmlBlock",
    "LatexBlock",
    "LatexDisplayMath",
    "LatexInlineMath",
    "ListBlock",
    "ListKind",
    "Literal",
    "OtherBlock",
    "OutputBlock",
    "Paragraph",
    "QuotedBlock",
    "SourceRange",
    "Span",
    "SpanBlock",
    "Strong",
    "TableBlock",
    "YamlFrontmatter",
]
