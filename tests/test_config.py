"""
Tests for Project Configuration loading.
"""

import pytest
from pydantic import ValidationError

from testable_transformers.config import HarnessConfig, _load_toml_settings


def test_defaults(tmp_path):
  config = HarnessConfig.load(search_path=tmp_path)
  assert config.diff_context == 3
  assert config.marker_decorators == ["transformer"]


def test_toml_values(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    '[tool.testable_transformers]\ndiff_context = 5\nmarker_decorators = ["transformer", "attribute"]\n'
  )
  config = HarnessConfig.load(search_path=tmp_path)

  assert config.diff_context == 5
  assert config.marker_decorators == ["transformer", "attribute"]


def test_search_from_subdirectory(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.testable_transformers]\ndiff_context = 1\n")
  nested = tmp_path / "src" / "pkg"
  nested.mkdir(parents=True)

  settings, root = _load_toml_settings(nested)
  assert settings == {"diff_context": 1}
  assert root == tmp_path.resolve()


def test_other_tool_tables_ignored(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n\n[tool.ruff]\nline-length = 120\n')
  assert HarnessConfig.load(search_path=tmp_path) == HarnessConfig()


def test_overrides_win(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.testable_transformers]\ndiff_context = 5\n")
  config = HarnessConfig.load(diff_context=0, marker_decorators=["attr"], search_path=tmp_path)

  assert config.diff_context == 0
  assert config.marker_decorators == ["attr"]


def test_markers_are_stripped():
  assert HarnessConfig(marker_decorators=[" attribute "]).marker_decorators == ["attribute"]


@pytest.mark.parametrize("markers", [[], ["not.valid"], ["two words"]])
def test_invalid_markers(markers):
  with pytest.raises(ValidationError):
    HarnessConfig(marker_decorators=markers)


def test_negative_context():
  with pytest.raises(ValidationError):
    HarnessConfig(diff_context=-1)
