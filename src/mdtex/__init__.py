"""Primary public API for mdtex."""

from __future__ import annotations

from mdtex.adapters.latex.renderer import LaTeXRenderer
from mdtex.adapters.latex.utils import latex_encode
from mdtex.api import render_document, render_to_string
from mdtex.core.config import RenderConfig
from mdtex.core.context import FormattingContext, LinkTarget
from mdtex.core.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from mdtex.core.exceptions import (
    DocumentLoadError,
    InvalidNodeError,
    LatexRenderingError,
    MissingRenderRuleError,
    UnresolvedReferenceError,
)
from mdtex.core.references import lookup_reference
from mdtex.core.rules import RenderEngine, renders
from mdtex.core.substitutions import SubstitutionContext, apply_substitutions
from mdtex.version import get_version


__version__ = get_version()

__all__ = [
    "DiagnosticEmitter",
    "DocumentLoadError",
    "FormattingContext",
    "InvalidNodeError",
    "LaTeXRenderer",
    "LatexRenderingError",
    "LinkTarget",
    "LoggingEmitter",
    "MissingRenderRuleError",
    "NullEmitter",
    "RenderConfig",
    "RenderEngine",
    "SubstitutionContext",
    "UnresolvedReferenceError",
    "__version__",
    "apply_substitutions",
    "latex_encode",
    "lookup_reference",
    "render_document",
    "render_to_string",
    "renders",
]
