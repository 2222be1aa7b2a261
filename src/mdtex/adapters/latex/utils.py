"""Utility helpers specific to LaTeX rendering."""

from __future__ import annotations

import html
import re

from pylatexenc.latexencode import unicode_to_latex


_BACKSLASH_PLACEHOLDER = r"<\textbackslash>"

# Applied in order: the backslash goes through a placeholder so the command
# written in its place is not escaped by the brace rules that follow.
LATEX_SPECIAL_CHARS: tuple[tuple[str, str], ...] = (
    ("\\", _BACKSLASH_PLACEHOLDER),
    ("#", r"\#"),
    ("$", r"\$"),
    ("%", r"\%"),
    ("&", r"\&"),
    ("_", r"\_"),
    ("{", r"\{"),
    ("}", r"\}"),
    (_BACKSLASH_PLACEHOLDER, r"{\textbackslash}"),
    ("~", r"{\textasciitilde}"),
    ("^", r"{\textasciicircum}"),
)

_ACCENT_NEEDS_BRACES_PATTERN = re.compile(
    r"\\([" + re.escape("`'^\"~=\\.Hrvuck") + r"])\s*([A-Za-z])(?!\{)"
)


def _wrap_latex_output(payload: str) -> str:
    """Ensure accent macros wrap their payload in braces."""

    def _repl(match: re.Match[str]) -> str:
        command, char = match.groups()
        return f"\\{command}{{{char}}}"

    return _ACCENT_NEEDS_BRACES_PATTERN.sub(_repl, payload)


def latex_encode(text: str, *, legacy_accents: bool = False) -> str:
    """Decode HTML entities and escape LaTeX special characters.

    Not idempotent: encode text exactly once, where it becomes a LaTeX literal.
    """
    encoded = html.unescape(text)
    for needle, replacement in LATEX_SPECIAL_CHARS:
        encoded = encoded.replace(needle, replacement)
    if legacy_accents:
        encoded = unicode_to_latex(encoded, non_ascii_only=True, unknown_char_warning=False)
        encoded = _wrap_latex_output(encoded)
    return encoded


__all__ = ["LATEX_SPECIAL_CHARS", "latex_encode"]
