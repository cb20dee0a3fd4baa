"""
Entry point for module execution (``python -m foreach_fixer``).

This module delegates execution to the CLI handler in ``foreach_fixer.cli.__main__``.
"""

import sys
from foreach_fixer.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
