"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console isolation so log capture in one test does not leak into the next.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'testable_transformers' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Sample transformer modules live next to this file
sys.path.insert(0, str(Path(__file__).parent))

from testable_transformers.utils.console import reset_console  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_console():
  """Restores the default console after every test."""
  yield
  reset_console()
