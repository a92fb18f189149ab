"""
Entry point for module execution (``python -m testable_transformers``).

This module delegates execution to the CLI handler in ``testable_transformers.cli.__main__``.
"""

import sys
from testable_transformers.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
