from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import io
from typing import Any

import pytest

from mdtex.adapters.latex.renderer import LaTeXRenderer
from mdtex.core.config import RenderConfig
from mdtex.core.context import LinkTarget
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


@dataclass
class RecordingEmitter:
    debug_enabled: bool = False
    warnings: list[str] = field(default_factory=list)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        raise AssertionError(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


def render_spans(
    *spans: Span,
    links: Mapping[str, LinkTarget] | None = None,
    diagnostics: RecordingEmitter | None = None,
    **options: Any,
) -> str:
    renderer = LaTeXRenderer(RenderConfig(**options), diagnostics=diagnostics)
    buffer = io.StringIO()
    context = renderer.create_context(buffer, links).with_small_break()
    context.render_spans(spans)
    return buffer.getvalue()


def test_literal_is_escaped() -> None:
    assert render_spans(Literal("100% done & $5")) == "100\\% done \\& \\$5"


def test_strong_and_emphasis_nest() -> None:
    span = Emphasis((Literal("Very "), Strong((Literal("important"),))))
    assert render_spans(span) == "\\emph{Very \\textbf{important}}"


def test_inline_code_body_is_escaped() -> None:
    assert render_spans(InlineCode("my_var")) == "\\texttt{my\\_var}"


def test_math_is_written_verbatim() -> None:
    assert render_spans(LatexInlineMath("x^2_i")) == "$x^2_i$"
    assert render_spans(LatexDisplayMath("\\sum_i x")) == "$$\\sum_i x$$"


def test_hard_line_break_writes_two_breaks() -> None:
    latex = render_spans(Literal("a"), HardLineBreak(), Literal("b"))
    assert latex == "a\n\nb"


def test_hard_line_break_honours_newline() -> None:
    latex = render_spans(Literal("a"), HardLineBreak(), newline="crlf")
    assert latex == "a\r\n\r\n"


def test_anchor_link_renders_nothing() -> None:
    assert render_spans(AnchorLink("section-1")) == ""


def test_direct_link_escapes_target_only() -> None:
    span = DirectLink((Literal("docs"),), "http://example.org/a_b#top")
    assert render_spans(span) == "\\href{http://example.org/a\\_b\\#top}{docs}"


def test_indirect_link_resolves_multiline_label() -> None:
    span = IndirectLink((Literal("text"),), "[text][my\nlabel]", "my\nlabel")
    latex = render_spans(span, links={"my label": LinkTarget("x")})
    assert latex == "\\href{x}{text}"


def test_unresolved_indirect_link_falls_back_to_original() -> None:
    emitter = RecordingEmitter()
    span = IndirectLink((Literal("text"),), "[text][nope]", "nope")

    latex = render_spans(span, diagnostics=emitter)

    assert latex == "\\href{[text][nope]}{text}"
    assert len(emitter.warnings) == 1
    assert "nope" in emitter.warnings[0]


def test_unresolved_indirect_link_raises_in_strict_mode() -> None:
    span = IndirectLink((Literal("text"),), "[text][nope]", "nope")

    with pytest.raises(UnresolvedReferenceError) as excinfo:
        render_spans(span, strict_references=True)

    assert excinfo.value.key == "nope"


def test_image_without_alt_text_is_bare() -> None:
    latex = render_spans(DirectImage("", "img.png"))
    assert latex == "\\includegraphics[width=1.0\\textwidth]{img.png}\n"


def test_whitespace_alt_text_counts_as_empty() -> None:
    latex = render_spans(DirectImage("   ", "img.png"))
    assert "figure" not in latex


def test_image_with_alt_text_becomes_a_figure() -> None:
    latex = render_spans(DirectImage("A cat & a dog", "cat.png"))
    assert latex == (
        "\\begin{figure}[htbp]\\centering\n"
        "\\includegraphics[width=1.0\\textwidth]{cat.png}\n"
        "\\caption{A cat \\& a dog}\n"
        "\\end{figure}\n"
    )


def test_indirect_image_uses_label_table() -> None:
    span = IndirectImage("", "![][logo]", "logo")
    latex = render_spans(span, links={"logo": LinkTarget("assets/logo.pdf", "Logo")})
    assert latex == "\\includegraphics[width=1.0\\textwidth]{assets/logo.pdf}\n"


def test_embedded_spans_are_expanded() -> None:
    class Version:
        def render(self) -> tuple[Span, ...]:
            return (Literal("v1_2"), Emphasis((Literal("beta"),)))

    assert render_spans(EmbedSpans(Version())) == "v1\\_2\\emph{beta}"


def test_legacy_accents_option_reaches_literals() -> None:
    assert "\\'{e}" in render_spans(Literal("café"), legacy_latex_accents=True)
    assert render_spans(Literal("café")) == "café"
