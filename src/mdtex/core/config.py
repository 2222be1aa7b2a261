"""Configuration model used by the LaTeX renderer.

RenderConfig

`newline` (`str`)
: Line separator written by the standard break policy. Accepts the literal
  separator or the aliases ``lf`` and ``crlf``.

`generate_line_numbers` (`bool`)
: Emit ``[numbers=left]`` on every ``lstlisting`` environment.

`define_symbol` (`str`)
: Conditional-compilation symbol used when adjusting script code blocks.

`script_language` (`str`)
: Language tag of code blocks whose ``#if`` sections are adjusted for
  ``define_symbol`` before emission.

`legacy_latex_accents` (`bool`)
: When `True`, escape accented characters using legacy LaTeX macros. When
  `False`, keep Unicode glyphs compatible with LuaLaTeX/XeLaTeX (default).

`strict_references` (`bool`)
: Raise instead of falling back when an indirect link or image label is not
  found in the label table.

`substitutions` (`dict[str, str]`)
: Placeholder replacements applied by the substitution pass, in order.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
import yaml


DEFAULT_DEFINE_SYMBOL = "LATEX"

_NEWLINE_ALIASES = {"lf": "\n", "crlf": "\r\n", "cr": "\r"}


class RenderConfig(BaseModel):
    """Options controlling a rendering pass."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    newline: str = "\n"
    generate_line_numbers: bool = False
    define_symbol: str = DEFAULT_DEFINE_SYMBOL
    script_language: str = "fsharp"
    legacy_latex_accents: bool = False
    strict_references: bool = False
    substitutions: dict[str, str] = Field(default_factory=dict)

    @field_validator("newline", mode="before")
    @classmethod
    def resolve_newline_alias(cls, value: Any) -> Any:
        """Translate ``lf``/``crlf`` aliases into the actual separator."""
        if isinstance(value, str):
            return _NEWLINE_ALIASES.get(value.strip().lower(), value)
        return value

    @field_validator("newline")
    @classmethod
    def reject_empty_newline(cls, value: str) -> str:
        if not value:
            raise ValueError("newline must not be empty")
        return value

    @classmethod
    def from_file(cls, path: Path | str) -> RenderConfig:
        """Load a configuration from a YAML file."""
        payload = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(payload, dict):
            raise ValueError(f"Configuration file '{path}' must contain a mapping")
        return cls.model_validate(payload)


__all__ = ["DEFAULT_DEFINE_SYMBOL", "RenderConfig"]
