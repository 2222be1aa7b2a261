"""Link label lookup tolerant to labels split across source lines."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TypeVar


T = TypeVar("T")


def reference_variants(label: str) -> Iterator[str]:
    """Yield the candidate keys for ``label`` in lookup priority order."""
    yield label
    yield label.replace("\r\n", "")
    yield label.replace("\r\n", " ")
    yield label.replace("\n", "")
    yield label.replace("\n", " ")


def lookup_reference(links: Mapping[str, T], label: str) -> T | None:
    """Return the first table entry matching ``label`` or one of its variants."""
    for candidate in reference_variants(label):
        if candidate in links:
            return links[candidate]
    return None


__all__ = ["lookup_reference", "reference_variants"]
