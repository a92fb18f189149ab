"""
Main Entry Point for the testable-transformers CLI.

This module handles argument parsing and dispatches to the command
handlers defined in `testable_transformers.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from testable_transformers import __version__
from testable_transformers.cli import handlers


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="testable-transformers: split and test source transformers")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: EXPAND ---
  cmd_expand = subparsers.add_parser("expand", help="Show a module with its transformers expanded")
  cmd_expand.add_argument("path", type=Path, help="Python module defining transformers")
  cmd_expand.add_argument("--out", type=Path, help="Write the expanded module here instead of stdout")
  cmd_expand.add_argument(
    "--marker",
    action="append",
    dest="markers",
    help="Decorator name marking a transformer (repeatable, default: from toml or 'transformer')",
  )

  # --- Command: COMPARE ---
  cmd_compare = subparsers.add_parser("compare", help="Check two Python files for structural equivalence")
  cmd_compare.add_argument("actual", type=Path, help="File with the actual output")
  cmd_compare.add_argument("expected", type=Path, help="File with the expected output")
  cmd_compare.add_argument("--context", type=int, default=None, help="Diff context lines (default: from toml or 3)")

  args = parser.parse_args(argv)

  if args.command == "expand":
    return handlers.handle_expand(args.path, args.out, args.markers)

  elif args.command == "compare":
    return handlers.handle_compare(args.actual, args.expected, args.context)

  return 1


if __name__ == "__main__":
  sys.exit(main())
