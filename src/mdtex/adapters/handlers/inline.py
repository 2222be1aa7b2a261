"""Inline handlers turning span nodes into LaTeX."""

from __future__ import annotations

from mdtex.core.context import FormattingContext
from mdtex.core.document import (
    AnchorLink,
    DirectImage,
    DirectLink,
    EmbedSpans,
    Emphasis,
    HardLineBreak,
    IndirectImage,
    IndirectLink,
    InlineCode,
    LatexDisplayMath,
    LatexInlineMath,
    Literal,
    Span,
    Strong,
)
from mdtex.core.exceptions import UnresolvedReferenceError
from mdtex.core.references import lookup_reference
from mdtex.core.rules import renders

from ..latex.utils import latex_encode


def _encode(context: FormattingContext, text: str) -> str:
    return latex_encode(text, legacy_accents=context.legacy_latex_accents)


def _resolve_indirect(context: FormattingContext, key: str, original: str) -> str:
    """Return the target for a label, falling back to the original source text."""
    target = lookup_reference(context.links, key)
    if target is not None:
        return target.url
    if context.strict_references:
        raise UnresolvedReferenceError(key)
    context.diagnostics.warning(
        f"Link reference '{key}' not found; using '{original}' as the target."
    )
    return original


def _write_href(context: FormattingContext, link: str, body: tuple[Span, ...]) -> None:
    context.write("\\href{")
    context.write(_encode(context, link))
    context.write("}{")
    context.render_spans(body)
    context.write("}")


def _write_image(context: FormattingContext, link: str, body: str) -> None:
    captioned = bool(body.strip())
    if captioned:
        context.write("\\begin{figure}[htbp]\\centering")
        context.line_break()

    context.write("\\includegraphics[width=1.0\\textwidth]{")
    context.write(_encode(context, link))
    context.write("}")
    context.line_break()

    if captioned:
        context.write("\\caption{")
        context.write(_encode(context, body))
        context.write("}")
        context.line_break()
        context.write("\\end{figure}")
        context.line_break()


@renders(LatexInlineMath, name="inline_math")
def render_inline_math(span: LatexInlineMath, context: FormattingContext) -> None:
    """Render inline math verbatim between single dollars."""
    context.write(f"${span.code}$")


@renders(LatexDisplayMath, name="display_math")
def render_display_math(span: LatexDisplayMath, context: FormattingContext) -> None:
    """Render display math verbatim between double dollars."""
    context.write(f"$${span.code}$$")


@renders(EmbedSpans, name="embedded_spans")
def render_embedded_spans(span: EmbedSpans, context: FormattingContext) -> None:
    """Expand an embedded span command and render its result."""
    context.render_spans(span.command.render())


@renders(Literal, name="literal")
def render_literal(span: Literal, context: FormattingContext) -> None:
    context.write(_encode(context, span.text))


@renders(HardLineBreak, name="hard_line_break")
def render_hard_line_break(_span: HardLineBreak, context: FormattingContext) -> None:
    """Render a hard break as a blank line under the active break policy."""
    context.line_break()
    context.line_break()


@renders(AnchorLink, name="anchor_link")
def render_anchor_link(_span: AnchorLink, _context: FormattingContext) -> None:
    """Anchors have no textual LaTeX counterpart."""
    return None


@renders(DirectLink, name="direct_link")
def render_direct_link(span: DirectLink, context: FormattingContext) -> None:
    _write_href(context, span.link, span.body)


@renders(IndirectLink, name="indirect_link")
def render_indirect_link(span: IndirectLink, context: FormattingContext) -> None:
    """Render a label-referenced link through the label table."""
    _write_href(context, _resolve_indirect(context, span.key, span.original), span.body)


@renders(DirectImage, name="direct_image")
def render_direct_image(span: DirectImage, context: FormattingContext) -> None:
    """Render an image, wrapped in a captioned figure when alt text is present."""
    _write_image(context, span.link, span.body)


@renders(IndirectImage, name="indirect_image")
def render_indirect_image(span: IndirectImage, context: FormattingContext) -> None:
    _write_image(context, _resolve_indirect(context, span.key, span.original), span.body)


@renders(Strong, name="strong")
def render_strong(span: Strong, context: FormattingContext) -> None:
    context.write("\\textbf{")
    context.render_spans(span.body)
    context.write("}")


@renders(InlineCode, name="inline_code")
def render_inline_code(span: InlineCode, context: FormattingContext) -> None:
    """Render inline code inside \\texttt with its body escaped."""
    context.write("\\texttt{")
    context.write(_encode(context, span.code))
    context.write("}")


@renders(Emphasis, name="emphasis")
def render_emphasis(span: Emphasis, context: FormattingContext) -> None:
    context.write("\\emph{")
    context.render_spans(span.body)
    context.write("}")
