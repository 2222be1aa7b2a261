"""Block-level handlers turning paragraph nodes into LaTeX.

Rules write only their own construct. The uniform trailing break that separates
blocks is written by :meth:`FormattingContext.render_block` after each rule.
"""

from __future__ import annotations

from collections.abc import Iterable

from mdtex.core.context import FormattingContext
from mdtex.core.document import (
    Alignment,
    Block,
    CodeBlock,
    EmbedParagraphs,
    Heading,
    HorizontalRule,
    InlineHtmlBlock,
    LatexBlock,
    ListBlock,
    ListKind,
    OtherBlock,
    OutputBlock,
    Paragraph,
    QuotedBlock,
    SpanBlock,
    TableBlock,
    YamlFrontmatter,
)
from mdtex.core.rules import renders

from ..latex.code import adjust_code_for_conditional_defines


HEADING_COMMANDS: dict[int, str] = {
    1: "\\section*",
    2: "\\subsection*",
    3: "\\subsubsection*",
    4: "\\paragraph",
    5: "\\subparagraph",
}

HORIZONTAL_RULE = "\\noindent\\makebox[\\linewidth]{\\rule{\\linewidth}{0.4pt}}\\medskip"

_ALIGNMENT_SPECS: dict[Alignment, str] = {
    Alignment.RIGHT: "|r",
    Alignment.CENTER: "|c",
    Alignment.LEFT: "|l",
    Alignment.DEFAULT: "|l",
}


def column_spec(alignments: Iterable[Alignment]) -> str:
    """Return the ``tabular`` column specification for ``alignments``."""
    return "".join(_ALIGNMENT_SPECS[alignment] for alignment in alignments) + "|"


def _write_listing(context: FormattingContext, chunks: Iterable[str]) -> None:
    context.write("\\begin{lstlisting}")
    if context.generate_line_numbers:
        context.write("[numbers=left]" + context.newline)
    context.line_break()
    for chunk in chunks:
        context.write(chunk)
    context.line_break()
    context.write("\\end{lstlisting}")
    context.line_break()


def _write_row(
    context: FormattingContext,
    cell_context: FormattingContext,
    row: Iterable[tuple[Block, ...]],
    prefix: str = "",
    postfix: str = "",
) -> None:
    for index, cell in enumerate(row):
        if index:
            context.write(" & ")
        context.write(prefix)
        for block in cell:
            cell_context.render_block(block)
        context.write(postfix)


@renders(LatexBlock, name="latex_environment")
def render_latex_block(block: LatexBlock, context: FormattingContext) -> None:
    """Write a raw LaTeX environment without escaping its lines."""
    context.line_break()
    context.line_break()
    context.write(f"\\begin{{{block.env}}}")
    context.line_break()
    for line in block.lines:
        context.write(line)
        context.line_break()
    context.write(f"\\end{{{block.env}}}")
    context.line_break()
    context.line_break()


@renders(EmbedParagraphs, name="embedded_paragraphs")
def render_embedded_paragraphs(block: EmbedParagraphs, context: FormattingContext) -> None:
    context.render_blocks(block.command.render())


@renders(Heading, name="heading")
def render_heading(block: Heading, context: FormattingContext) -> None:
    """Render headings as starred sectioning commands.

    Levels outside 1-5 get an empty command so their text still appears.
    """
    command = HEADING_COMMANDS.get(block.level)
    if command is None:
        context.diagnostics.warning(
            f"Heading level {block.level} has no LaTeX sectioning command; rendering text only."
        )
        command = ""
    context.write(command + "{")
    context.render_spans(block.body)
    context.write("}")
    context.line_break()


@renders(Paragraph, name="paragraph")
def render_paragraph(block: Paragraph, context: FormattingContext) -> None:
    context.line_break()
    context.line_break()
    context.render_spans(block.body)


@renders(HorizontalRule, name="horizontal_rule")
def render_horizontal_rule(_block: HorizontalRule, context: FormattingContext) -> None:
    context.write(HORIZONTAL_RULE)
    context.line_break()


@renders(CodeBlock, name="code_block")
def render_code_block(block: CodeBlock, context: FormattingContext) -> None:
    """Render code verbatim inside ``lstlisting``."""
    code = block.code
    if block.language == context.script_language:
        code = adjust_code_for_conditional_defines(context.define_symbol, context.newline, code)
    _write_listing(context, (code,))


@renders(OutputBlock, name="output_block")
def render_output_block(block: OutputBlock, context: FormattingContext) -> None:
    _write_listing(context, (block.output,))


@renders(TableBlock, name="table")
def render_table(block: TableBlock, context: FormattingContext) -> None:
    """Render a ``tabular`` whose cells never introduce line breaks."""
    context.write(f"\\begin{{tabular}}{{{column_spec(block.alignments)}}}\\hline")
    context.line_break()

    cell_context = context.with_no_break()

    if block.headers is not None:
        _write_row(context, cell_context, block.headers, "\\textbf{", "}")
        context.write("\\\\ \\hline\\hline")
        context.line_break()

    for row in block.rows:
        _write_row(context, cell_context, row)
        context.write("\\\\ \\hline")
        context.line_break()

    context.write("\\end{tabular}")
    context.line_break()


@renders(ListBlock, name="list")
def render_list(block: ListBlock, context: FormattingContext) -> None:
    environment = "enumerate" if block.kind is ListKind.ORDERED else "itemize"
    context.write(f"\\begin{{{environment}}}")
    context.line_break()
    for item in block.items:
        context.write("\\item ")
        for child in item:
            context.render_block(child)
        context.line_break()
    context.write(f"\\end{{{environment}}}")
    context.line_break()


@renders(QuotedBlock, name="quote")
def render_quote(block: QuotedBlock, context: FormattingContext) -> None:
    context.write("\\begin{quote}")
    context.line_break()
    context.render_blocks(block.body)
    context.write("\\end{quote}")
    context.line_break()


@renders(SpanBlock, name="span_block")
def render_span_block(block: SpanBlock, context: FormattingContext) -> None:
    context.render_spans(block.body)


@renders(InlineHtmlBlock, name="inline_html")
def render_inline_html(block: InlineHtmlBlock, context: FormattingContext) -> None:
    """Pass raw HTML-like content through untouched."""
    context.write(block.code)


@renders(OtherBlock, name="other_block")
def render_other_block(block: OtherBlock, context: FormattingContext) -> None:
    _write_listing(context, block.fragments)


@renders(YamlFrontmatter, name="front_matter")
def render_front_matter(_block: YamlFrontmatter, _context: FormattingContext) -> None:
    """Front matter has no body text."""
    return None
