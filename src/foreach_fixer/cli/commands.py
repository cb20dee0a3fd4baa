"""
CLI Command Handlers Facade.

This module re-exports the handlers from `foreach_fixer.cli.handlers` so the
entry point (and tests patching it) have a single import location.
"""

from foreach_fixer.cli.handlers.check import handle_check
from foreach_fixer.cli.handlers.fix import (
  handle_fix,
  _fix_single_file,
  _print_batch_summary,
)
