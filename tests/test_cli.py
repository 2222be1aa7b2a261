from pathlib import Path

import pytest
from typer.testing import CliRunner

from mdtex.ui.cli import app


TREE = """
links:
  docs: https://example.org/docs
substitutions:
  "{{version}}": "2.0"
blocks:
  - type: heading
    level: 1
    body: [{type: literal, text: "Release {{version}}"}]
  - type: paragraph
    body:
      - type: indirect_link
        key: docs
        original: "[docs][docs]"
        body: [{type: literal, text: docs}]
"""

MISSING_LABEL = """
blocks:
  - type: paragraph
    body:
      - type: indirect_link
        key: missing
        original: "[x][missing]"
        body: [{type: literal, text: x}]
"""


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def tree_file(tmp_path: Path) -> Path:
    path = tmp_path / "tree.yml"
    path.write_text(TREE, encoding="utf-8")
    return path


def test_render_writes_latex_to_stdout(runner: CliRunner, tree_file: Path) -> None:
    result = runner.invoke(app, ["render", str(tree_file)])

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith("\\section*{Release 2.0}\n\n")
    assert "\\href{https://example.org/docs}{docs}" in result.stdout


def test_substitution_option_overrides_tree(runner: CliRunner, tree_file: Path) -> None:
    result = runner.invoke(app, ["render", str(tree_file), "-s", "{{version}}=3.1"])

    assert result.exit_code == 0, result.output
    assert "Release 3.1" in result.stdout


def test_invalid_substitution_is_a_usage_error(runner: CliRunner, tree_file: Path) -> None:
    result = runner.invoke(app, ["render", str(tree_file), "--substitution", "novalue"])

    assert result.exit_code == 2


def test_output_file_keeps_crlf(runner: CliRunner, tree_file: Path, tmp_path: Path) -> None:
    config = tmp_path / "render.yml"
    config.write_text("newline: crlf\n", encoding="utf-8")
    output = tmp_path / "out" / "doc.tex"

    result = runner.invoke(
        app,
        ["render", str(tree_file), "--config", str(config), "--line-numbers", "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    payload = output.read_bytes()
    assert payload.startswith(b"\\section*{Release 2.0}\r\n\r\n")
    assert b"\n" not in payload.replace(b"\r\n", b"")


def test_missing_label_warns_and_falls_back(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "missing.yml"
    path.write_text(MISSING_LABEL, encoding="utf-8")

    result = runner.invoke(app, ["render", str(path)])

    assert result.exit_code == 0, result.output
    assert "\\href{[x][missing]}{x}" in result.output
    assert "not found" in result.output


def test_strict_references_fail(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "missing.yml"
    path.write_text(MISSING_LABEL, encoding="utf-8")

    result = runner.invoke(app, ["render", str(path), "--strict-references"])

    assert result.exit_code == 1
    assert "Unresolved link reference 'missing'" in result.output


def test_invalid_tree_reports_error(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("blocks:\n  - type: mystery\n", encoding="utf-8")

    result = runner.invoke(app, ["render", str(path)])

    assert result.exit_code == 1
    assert "Unknown block type 'mystery'" in result.output


def test_verbose_reports_progress(runner: CliRunner, tree_file: Path) -> None:
    result = runner.invoke(app, ["render", str(tree_file), "-v"])

    assert result.exit_code == 0, result.output
    assert "Rendering 2 block(s)" in result.output
