"""Facade exposing the rendering entry points.

Usage Example
:
    >>> from mdtex.api import render_to_string
    >>> from mdtex.core.document import Literal, Paragraph
    >>> render_to_string([Paragraph((Literal("A & B"),))])
    '\\n\\nA \\\\& B\\n'
"""

from __future__ import annotations

from .render import render_document, render_to_string


__all__ = ["render_document", "render_to_string"]
