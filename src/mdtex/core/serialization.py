"""Load document trees from JSON or YAML payloads.

A tree document is a mapping::

    links:
      docs: {url: "https://example.org", title: "Docs"}
    substitutions:
      "{{version}}": "1.2"
    blocks:
      - type: heading
        level: 1
        body: [{type: literal, text: Introduction}]

Node ``type`` names are the snake_case class names of
:mod:`mdtex.core.document`. Embedded nodes carry live objects and cannot be
serialised.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
import json
from pathlib import Path
import re
from typing import Any

import yaml

from .context import LinkTarget
from .document import (
    Alignment,
    AnchorLink,
    Block,
    CodeBlock,
    DirectImage,
    DirectLink,
    Emphasis,
    HardLineBreak,
    Heading,
    HorizontalRule,
    IndirectImage,
    IndirectLink,
    InlineCode,
    InlineHtmlBlock,
    LatexBlock,
    LatexDisplayMath,
    LatexInlineMath,
    ListBlock,
    ListKind,
    Literal,
    OtherBlock,
    OutputBlock,
    Paragraph,
    QuotedBlock,
    SourceRange,
    Span,
    SpanBlock,
    Strong,
    TableBlock,
    YamlFrontmatter,
)
from .exceptions import DocumentLoadError


@dataclass(slots=True)
class TreeDocument:
    """Document tree together with its label and substitution tables."""

    blocks: tuple[Block, ...]
    links: dict[str, LinkTarget] = field(default_factory=dict)
    substitutions: dict[str, str] = field(default_factory=dict)


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _require(payload: Mapping[str, Any], key: str) -> Any:
    try:
        return payload[key]
    except KeyError as exc:
        node_type = payload.get("type", "<unknown>")
        raise DocumentLoadError(f"Node '{node_type}' is missing field '{key}'") from exc


def _range(payload: Mapping[str, Any]) -> SourceRange | None:
    value = payload.get("range")
    if value is None:
        return None
    if isinstance(value, Mapping):
        return SourceRange(**value)
    return SourceRange(*value)


def _spans(payload: Mapping[str, Any], key: str = "body") -> tuple[Span, ...]:
    return tuple(load_span(item) for item in payload.get(key) or ())


def _blocks(items: Sequence[Any] | None) -> tuple[Block, ...]:
    return tuple(load_block(item) for item in items or ())


def _cells(cells: Sequence[Any]) -> tuple[tuple[Block, ...], ...]:
    return tuple(_blocks(cell) for cell in cells)


_SPAN_LOADERS: dict[str, Callable[[Mapping[str, Any]], Span]] = {
    _snake_case(Literal.__name__): lambda p: Literal(_require(p, "text"), _range(p)),
    _snake_case(InlineCode.__name__): lambda p: InlineCode(_require(p, "code"), _range(p)),
    _snake_case(Strong.__name__): lambda p: Strong(_spans(p), _range(p)),
    _snake_case(Emphasis.__name__): lambda p: Emphasis(_spans(p), _range(p)),
    _snake_case(AnchorLink.__name__): lambda p: AnchorLink(_require(p, "link"), _range(p)),
    _snake_case(DirectLink.__name__): lambda p: DirectLink(
        _spans(p), _require(p, "link"), p.get("title"), _range(p)
    ),
    _snake_case(IndirectLink.__name__): lambda p: IndirectLink(
        _spans(p), p.get("original", ""), _require(p, "key"), _range(p)
    ),
    _snake_case(DirectImage.__name__): lambda p: DirectImage(
        p.get("body", ""), _require(p, "link"), p.get("title"), _range(p)
    ),
    _snake_case(IndirectImage.__name__): lambda p: IndirectImage(
        p.get("body", ""), p.get("original", ""), _require(p, "key"), _range(p)
    ),
    _snake_case(HardLineBreak.__name__): lambda p: HardLineBreak(_range(p)),
    _snake_case(LatexInlineMath.__name__): lambda p: LatexInlineMath(
        _require(p, "code"), _range(p)
    ),
    _snake_case(LatexDisplayMath.__name__): lambda p: LatexDisplayMath(
        _require(p, "code"), _range(p)
    ),
}


_BLOCK_LOADERS: dict[str, Callable[[Mapping[str, Any]], Block]] = {
    _snake_case(Heading.__name__): lambda p: Heading(int(_require(p, "level")), _spans(p), _range(p)),
    _snake_case(Paragraph.__name__): lambda p: Paragraph(_spans(p), _range(p)),
    _snake_case(HorizontalRule.__name__): lambda p: HorizontalRule(
        p.get("character", "-"), _range(p)
    ),
    _snake_case(CodeBlock.__name__): lambda p: CodeBlock(
        _require(p, "code"), p.get("language", ""), p.get("execution_count"), _range(p)
    ),
    _snake_case(OutputBlock.__name__): lambda p: OutputBlock(
        _require(p, "output"), p.get("kind", "text/plain"), p.get("execution_count"), _range(p)
    ),
    _snake_case(TableBlock.__name__): lambda p: TableBlock(
        _cells(p["headers"]) if p.get("headers") is not None else None,
        tuple(Alignment(value) for value in p.get("alignments") or ()),
        tuple(_cells(row) for row in p.get("rows") or ()),
        _range(p),
    ),
    _snake_case(ListBlock.__name__): lambda p: ListBlock(
        ListKind(p.get("kind", ListKind.UNORDERED.value)),
        tuple(_blocks(item) for item in p.get("items") or ()),
        _range(p),
    ),
    _snake_case(QuotedBlock.__name__): lambda p: QuotedBlock(_blocks(p.get("body")), _range(p)),
    _snake_case(InlineHtmlBlock.__name__): lambda p: InlineHtmlBlock(
        _require(p, "code"), p.get("execution_count"), _range(p)
    ),
    _snake_case(LatexBlock.__name__): lambda p: LatexBlock(
        _require(p, "env"), tuple(p.get("lines") or ()), _range(p)
    ),
    _snake_case(OtherBlock.__name__): lambda p: OtherBlock(
        tuple(p.get("fragments") or ()), _range(p)
    ),
    _snake_case(YamlFrontmatter.__name__): lambda p: YamlFrontmatter(
        tuple(p.get("lines") or ()), _range(p)
    ),
    _snake_case(SpanBlock.__name__): lambda p: SpanBlock(_spans(p), _range(p)),
}


def _node_type(payload: Any) -> str:
    if not isinstance(payload, Mapping):
        raise DocumentLoadError(f"Expected a node mapping, got {type(payload).__name__}")
    node_type = payload.get("type")
    if not isinstance(node_type, str):
        raise DocumentLoadError("Node mapping is missing its 'type'")
    return node_type


def load_span(payload: Any) -> Span:
    """Build a span node from its mapping representation."""
    node_type = _node_type(payload)
    loader = _SPAN_LOADERS.get(node_type)
    if loader is None:
        raise DocumentLoadError(f"Unknown span type '{node_type}'")
    try:
        return loader(payload)
    except (TypeError, ValueError) as exc:
        raise DocumentLoadError(f"Invalid '{node_type}' span: {exc}") from exc


def load_block(payload: Any) -> Block:
    """Build a block node from its mapping representation."""
    node_type = _node_type(payload)
    loader = _BLOCK_LOADERS.get(node_type)
    if loader is None:
        raise DocumentLoadError(f"Unknown block type '{node_type}'")
    try:
        return loader(payload)
    except (TypeError, ValueError) as exc:
        raise DocumentLoadError(f"Invalid '{node_type}' block: {exc}") from exc


def _load_links(payload: Any) -> dict[str, LinkTarget]:
    links: dict[str, LinkTarget] = {}
    if not isinstance(payload, Mapping):
        raise DocumentLoadError("'links' must be a mapping of labels to targets")
    for label, target in payload.items():
        if isinstance(target, str):
            links[str(label)] = LinkTarget(target)
        elif isinstance(target, Mapping) and "url" in target:
            links[str(label)] = LinkTarget(str(target["url"]), target.get("title"))
        else:
            raise DocumentLoadError(f"Invalid target for link label '{label}'")
    return links


def load_tree(payload: Any) -> TreeDocument:
    """Build a :class:`TreeDocument` from a decoded JSON/YAML payload."""
    if isinstance(payload, list):
        payload = {"blocks": payload}
    if not isinstance(payload, Mapping):
        raise DocumentLoadError("Tree document must be a mapping or a list of blocks")
    substitutions = payload.get("substitutions") or {}
    if not isinstance(substitutions, Mapping):
        raise DocumentLoadError("'substitutions' must be a mapping")
    return TreeDocument(
        blocks=_blocks(payload.get("blocks")),
        links=_load_links(payload.get("links") or {}),
        substitutions={str(key): str(value) for key, value in substitutions.items()},
    )


def load_tree_file(path: Path | str) -> TreeDocument:
    """Read a tree document from a ``.json``, ``.yml`` or ``.yaml`` file."""
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read tree document '{source}': {exc}") from exc
    try:
        if source.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DocumentLoadError(f"Failed to parse tree document '{source}': {exc}") from exc
    return load_tree(payload)


__all__ = ["TreeDocument", "load_block", "load_span", "load_tree", "load_tree_file"]
