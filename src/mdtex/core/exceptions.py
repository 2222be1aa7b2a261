"""Custom exception hierarchy for the LaTeX rendering pipeline."""

from __future__ import annotations

from collections.abc import Iterable


class LatexRenderingError(RuntimeError):
    """Base exception for LaTeX rendering failures."""


class InvalidNodeError(LatexRenderingError):
    """Raised when the engine receives an object that is not a document node."""


class MissingRenderRuleError(LatexRenderingError):
    """Raised when document node types have no registered render rule."""

    def __init__(self, node_types: Iterable[type]) -> None:
        self.node_types = tuple(node_types)
        names = ", ".join(sorted(node_type.__name__ for node_type in self.node_types))
        super().__init__(f"No render rule registered for: {names}")


class UnresolvedReferenceError(LatexRenderingError):
    """Raised in strict mode when a link label is missing from the label table."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unresolved link reference '{key}'")


class DocumentLoadError(LatexRenderingError):
    """Raised when a serialised document tree cannot be loaded."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "DocumentLoadError",
    "InvalidNodeError",
    "LatexRenderingError",
    "MissingRenderRuleError",
    "UnresolvedReferenceError",
    "exception_hint",
    "exception_messages",
]
