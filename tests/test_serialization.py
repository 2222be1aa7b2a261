import json
from pathlib import Path

import pytest

from mdtex.core.context import LinkTarget
from mdtex.core.document import (
    Alignment,
    Heading,
    IndirectLink,
    ListBlock,
    ListKind,
    Literal,
    Paragraph,
    SourceRange,
    TableBlock,
)
from mdtex.core.exceptions import DocumentLoadError
from mdtex.core.serialization import load_block, load_span, load_tree, load_tree_file


TREE_YAML = """
links:
  docs: https://example.org/docs
  api: {url: "https://example.org/api", title: API}
substitutions:
  "{{version}}": "2.0"
blocks:
  - type: heading
    level: 1
    body: [{type: literal, text: "Release {{version}}"}]
  - type: paragraph
    body:
      - {type: literal, text: "Read the "}
      - type: indirect_link
        key: docs
        original: "[docs][docs]"
        body: [{type: literal, text: docs}]
"""


def test_load_span_by_snake_case_name() -> None:
    span = load_span(
        {"type": "indirect_link", "key": "k", "body": [{"type": "literal", "text": "t"}]}
    )
    assert span == IndirectLink((Literal("t"),), "", "k")


def test_load_block_with_range() -> None:
    block = load_block(
        {
            "type": "paragraph",
            "body": [],
            "range": {"start_line": 1, "start_column": 0, "end_line": 1, "end_column": 4},
        }
    )
    assert block == Paragraph((), SourceRange(1, 0, 1, 4))


def test_load_table_and_list() -> None:
    cell = [{"type": "paragraph", "body": [{"type": "literal", "text": "c"}]}]
    table = load_block(
        {
            "type": "table_block",
            "headers": None,
            "alignments": ["left", "center"],
            "rows": [[cell, cell]],
        }
    )
    items = load_block({"type": "list_block", "kind": "ordered", "items": [cell]})

    assert isinstance(table, TableBlock)
    assert table.headers is None
    assert table.alignments == (Alignment.LEFT, Alignment.CENTER)
    assert isinstance(items, ListBlock)
    assert items.kind is ListKind.ORDERED


def test_load_tree_accepts_plain_block_list() -> None:
    document = load_tree([{"type": "horizontal_rule"}])
    assert len(document.blocks) == 1
    assert document.links == {}


def test_load_tree_file_yaml(tmp_path: Path) -> None:
    path = tmp_path / "tree.yml"
    path.write_text(TREE_YAML, encoding="utf-8")

    document = load_tree_file(path)

    assert document.links == {
        "docs": LinkTarget("https://example.org/docs"),
        "api": LinkTarget("https://example.org/api", "API"),
    }
    assert document.substitutions == {"{{version}}": "2.0"}
    assert document.blocks[0] == Heading(1, (Literal("Release {{version}}"),))


def test_load_tree_file_json(tmp_path: Path) -> None:
    path = tmp_path / "tree.json"
    path.write_text(json.dumps({"blocks": [{"type": "code_block", "code": "x"}]}), encoding="utf-8")

    document = load_tree_file(path)

    assert document.blocks[0].code == "x"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"type": "mystery"}, "Unknown block type 'mystery'"),
        ({"body": []}, "missing its 'type'"),
        ({"type": "heading", "body": []}, "missing field 'level'"),
        ({"type": "list_block", "kind": "numbered"}, "Invalid 'list_block' block"),
        ("paragraph", "Expected a node mapping"),
    ],
)
def test_invalid_blocks_raise(payload: object, message: str) -> None:
    with pytest.raises(DocumentLoadError, match=message):
        load_block(payload)


def test_invalid_link_target_raises() -> None:
    with pytest.raises(DocumentLoadError, match="link label 'bad'"):
        load_tree({"links": {"bad": 3}, "blocks": []})


def test_unreadable_file_raises(tmp_path: Path) -> None:
    with pytest.raises(DocumentLoadError, match="Failed to read"):
        load_tree_file(tmp_path / "missing.yml")


def test_malformed_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("blocks: [unterminated", encoding="utf-8")

    with pytest.raises(DocumentLoadError, match="Failed to parse"):
        load_tree_file(path)
