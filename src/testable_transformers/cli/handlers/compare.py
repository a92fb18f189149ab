"""CLI comparison command."""

from pathlib import Path
from typing import Optional

from rich.markup import escape
from rich.syntax import Syntax

from testable_transformers.config import HarnessConfig
from testable_transformers.core.comparator import compare
from testable_transformers.core.errors import ParseFailure, RenderFailure
from testable_transformers.core.syntax import DEFAULT_CONVERTER
from testable_transformers.utils.console import console, log_error, log_success


def handle_compare(actual: Path, expected: Path, context: Optional[int] = None) -> int:
  """
  Handles 'compare' command.

  Args:
      actual (Path): File holding the actual output.
      expected (Path): File holding the expected output.
      context (Optional[int]): Diff context lines, overriding the configuration.

  Returns:
      int: 0 if equivalent, 1 if not, 2 if a file is missing or cannot be parsed.
  """
  for path in (actual, expected):
    if not path.is_file():
      log_error(f"File not found: [path]{escape(str(path))}[/path]")
      return 2

  try:
    config = HarnessConfig.load(diff_context=context, search_path=expected.parent)
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 2

  try:
    actual_tree = DEFAULT_CONVERTER.parse_item(actual.read_bytes(), str(actual))
    expected_tree = DEFAULT_CONVERTER.parse_item(expected.read_bytes(), str(expected))
    result = compare(actual_tree, expected_tree)
  except (ParseFailure, RenderFailure) as e:
    log_error(escape(str(e)))
    return 2

  if result:
    log_success(f"[path]{escape(actual.name)}[/path] is equivalent to [path]{escape(expected.name)}[/path]")
    return 0

  log_error(f"[path]{escape(actual.name)}[/path] differs from [path]{escape(expected.name)}[/path]")
  console.print(Syntax(result.diff(config.diff_context), "diff"))
  return 1
