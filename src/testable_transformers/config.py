"""
Project Configuration.

Settings are read from the ``[tool.testable_transformers]`` table of the
nearest ``pyproject.toml`` and can be overridden by explicit arguments
(e.g. from the CLI)::

    [tool.testable_transformers]
    diff_context = 5
    marker_decorators = ["transformer", "attribute"]
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

TOOL_SECTION = "testable_transformers"


class HarnessConfig(BaseModel):
  """
  Configuration for the CLI commands.
  """

  diff_context: int = Field(3, ge=0, description="Unchanged lines shown around each change in diffs.")
  marker_decorators: List[str] = Field(
    default_factory=lambda: ["transformer"],
    description="Decorator names that mark a transformer during source expansion.",
  )

  @field_validator("marker_decorators")
  @classmethod
  def validate_markers(cls, v: List[str]) -> List[str]:
    """
    Ensures every marker is a plain identifier.

    Args:
        v (List[str]): The decorator names.

    Returns:
        List[str]: The stripped names.

    Raises:
        ValueError: If the list is empty or a name is not an identifier.
    """
    cleaned = [name.strip() for name in v]
    if not cleaned:
      raise ValueError("At least one marker decorator is required.")
    for name in cleaned:
      if not name.isidentifier():
        raise ValueError(f"Invalid marker decorator name: '{name}'")
    return cleaned

  @classmethod
  def load(
    cls,
    diff_context: Optional[int] = None,
    marker_decorators: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "HarnessConfig":
    """
    Loads configuration from pyproject.toml and applies overrides.

    Args:
        diff_context (Optional[int]): Override for diff context lines.
        marker_decorators (Optional[List[str]]): Override for marker names.
        search_path (Optional[Path]): Directory to start searching for pyproject.toml.

    Returns:
        HarnessConfig: The resolved configuration.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    values: Dict[str, Any] = dict(toml_config)
    if diff_context is not None:
      values["diff_context"] = diff_context
    if marker_decorators:
      values["marker_decorators"] = marker_decorators

    return cls.model_validate(values)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches `start_path` and its parents for 'pyproject.toml' and extracts the tool table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      return data.get("tool", {}).get(TOOL_SECTION, {}), parent

  return {}, None
