"""
Tests for the 'expand' command.

Verifies:
1. Expanded source is printed to stdout or written to `--out`.
2. Markers come from the CLI, then pyproject.toml.
3. Invalid input is reported with exit code 1.
"""

import io

import pytest
from rich.console import Console

from testable_transformers.cli.__main__ import main
from testable_transformers.utils.console import set_console

MODULE = """from testable_transformers import AttributeArguments, ItemTree, transformer


@transformer
def identity(args: AttributeArguments, item: ItemTree) -> ItemTree:
    return item
"""


@pytest.fixture
def recorder():
  """Routes log output away from stdout so only the expanded code lands there."""
  capture = Console(record=True, width=200, file=io.StringIO())
  set_console(capture)
  return capture


def test_expand_to_stdout(tmp_path, capsys, recorder):
  src = tmp_path / "attrs.py"
  src.write_text(MODULE, encoding="utf-8")

  assert main(["expand", str(src)]) == 0

  out = capsys.readouterr().out
  assert out.startswith("from testable_transformers import invoke_boundary\n")
  assert "def identity(attributes: str, item: str) -> str:" in out
  assert "class implementation:" in out
  assert "Expanded identity" in recorder.export_text()


def test_expand_to_file(tmp_path, capsys, recorder):
  src = tmp_path / "attrs.py"
  src.write_text(MODULE, encoding="utf-8")
  dest = tmp_path / "build" / "attrs_expanded.py"

  assert main(["expand", str(src), "--out", str(dest)]) == 0

  assert capsys.readouterr().out == ""
  assert "class implementation:" in dest.read_text(encoding="utf-8")
  assert "Wrote" in recorder.export_text()


def test_expand_without_transformers_warns(tmp_path, capsys, recorder):
  src = tmp_path / "plain.py"
  src.write_text("x = 1\n", encoding="utf-8")

  assert main(["expand", str(src)]) == 0

  assert capsys.readouterr().out == "x = 1\n"
  assert "No transformers marked with transformer" in recorder.export_text()


def test_marker_option(tmp_path, capsys, recorder):
  src = tmp_path / "attrs.py"
  src.write_text(MODULE.replace("@transformer", "@attribute"), encoding="utf-8")

  assert main(["expand", str(src), "--marker", "attribute"]) == 0
  assert "class implementation:" in capsys.readouterr().out


def test_markers_from_pyproject(tmp_path, capsys, recorder):
  (tmp_path / "pyproject.toml").write_text('[tool.testable_transformers]\nmarker_decorators = ["attribute"]\n')
  src = tmp_path / "attrs.py"
  src.write_text(MODULE.replace("@transformer", "@attribute"), encoding="utf-8")

  assert main(["expand", str(src)]) == 0
  assert "class implementation:" in capsys.readouterr().out


def test_invalid_marker_option(tmp_path, recorder):
  src = tmp_path / "attrs.py"
  src.write_text(MODULE, encoding="utf-8")

  assert main(["expand", str(src), "--marker", "not.valid"]) == 1
  assert "Invalid configuration" in recorder.export_text()


def test_missing_file(tmp_path, recorder):
  assert main(["expand", str(tmp_path / "missing.py")]) == 1
  assert "File not found" in recorder.export_text()


def test_shape_mismatch_reported(tmp_path, recorder):
  src = tmp_path / "bad.py"
  src.write_text(
    "@transformer\ndef bad(args: AttributeArguments, item: ItemTree, extra: int) -> ItemTree:\n    return item\n",
    encoding="utf-8",
  )

  assert main(["expand", str(src)]) == 1
  assert "'bad' cannot be used as a transformer" in recorder.export_text()


def test_syntax_error_reported(tmp_path, recorder):
  src = tmp_path / "broken.py"
  src.write_text("def broken(:\n", encoding="utf-8")

  assert main(["expand", str(src)]) == 1
  assert "Failed to parse" in recorder.export_text()


def test_marker_below_module_level_reported(tmp_path, capsys, recorder):
  src = tmp_path / "nested.py"
  src.write_text(
    "if True:\n"
    "    @transformer\n"
    "    def hidden(args: AttributeArguments, item: ItemTree) -> ItemTree:\n"
    "        return item\n",
    encoding="utf-8",
  )

  assert main(["expand", str(src)]) == 1
  assert capsys.readouterr().out == ""
  assert "'hidden' must be defined at module level" in recorder.export_text()
