"""CLI expansion command."""

from pathlib import Path
from typing import List, Optional

from rich.markup import escape

from testable_transformers.config import HarnessConfig
from testable_transformers.core.errors import TransformerError
from testable_transformers.core.generator import AdapterGenerator
from testable_transformers.core.syntax import DEFAULT_CONVERTER
from testable_transformers.utils.console import log_error, log_info, log_success, log_warning


def handle_expand(path: Path, out: Optional[Path] = None, markers: Optional[List[str]] = None) -> int:
  """
  Handles 'expand' command.

  Prints the expanded module to stdout, or writes it to `out`.

  Args:
      path (Path): Module to expand.
      out (Optional[Path]): Destination file.
      markers (Optional[List[str]]): Decorator names overriding the configured markers.

  Returns:
      int: Exit code (0 on success, 1 on failure).
  """
  if not path.is_file():
    log_error(f"File not found: [path]{escape(str(path))}[/path]")
    return 1

  try:
    config = HarnessConfig.load(marker_decorators=markers, search_path=path.parent)
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  generator = AdapterGenerator(config.marker_decorators)

  try:
    module = DEFAULT_CONVERTER.parse_item(path.read_bytes(), str(path))
    code = module.visit(generator).code
  except TransformerError as e:
    log_error(escape(str(e)))
    return 1

  if not generator.implementations:
    names = ", ".join(config.marker_decorators)
    log_warning(f"No transformers marked with [marker]{names}[/marker] in {escape(str(path))}")
  else:
    log_info(f"Expanded [marker]{', '.join(generator.expanded_names)}[/marker]")

  if out:
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(code, encoding="utf-8")
    log_success(f"Wrote [path]{escape(str(out))}[/path]")
  else:
    print(code, end="")
  return 0
