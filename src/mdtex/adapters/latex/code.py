"""Conditional-compilation adjustments for literate script code blocks."""

from __future__ import annotations


def adjust_code_for_conditional_defines(define_symbol: str, newline: str, code: str) -> str:
    """Strip ``#if`` scaffolding aimed at ``define_symbol`` from script code.

    ``#if SYMBOL`` / ``#endif // SYMBOL`` marker lines are removed while the
    lines between them are kept. Sections from ``#if !SYMBOL`` up to
    ``#endif // !SYMBOL`` are removed entirely. Line endings are normalised to
    ``newline``.
    """
    include_start = f"#if {define_symbol}"
    include_end = f"#endif // {define_symbol}"
    exclude_start = f"#if !{define_symbol}"
    exclude_end = f"#endif // !{define_symbol}"

    lines = code.replace("\r\n", "\n").split("\n")
    kept: list[str] = []
    excluding = False
    for line in lines:
        marker = line.strip()
        if excluding:
            if marker == exclude_end:
                excluding = False
            continue
        if marker == exclude_start:
            excluding = True
            continue
        if marker in (include_start, include_end):
            continue
        kept.append(line)
    return newline.join(kept)


__all__ = ["adjust_code_for_conditional_defines"]
