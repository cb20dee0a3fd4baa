"""
Main Entry Point for foreach-fixer CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `foreach_fixer.cli.commands`.
"""

import argparse
from pathlib import Path
from typing import List, Optional

from foreach_fixer import __version__
from foreach_fixer.cli import commands
from foreach_fixer.utils.console import set_verbose


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="foreach-fixer: replace Array#forEach statements with for…of loops")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Log analysis decisions")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CHECK ---
  cmd_check = subparsers.add_parser("check", help="Report forEach statements")
  cmd_check.add_argument("paths", type=Path, nargs="+", help="Input source files or directories")
  cmd_check.add_argument("--json", action="store_true", help="Print diagnostics as JSON")

  # --- Command: FIX ---
  cmd_fix = subparsers.add_parser("fix", help="Rewrite fixable forEach statements in place")
  cmd_fix.add_argument("paths", type=Path, nargs="+", help="Input source files or directories")
  cmd_fix.add_argument("--dry-run", action="store_true", help="Print a unified diff instead of writing files")
  cmd_fix.add_argument("--max-passes", type=int, default=None, help="Maximum fix passes per file (default: 10)")
  cmd_fix.add_argument("--json-trace", type=Path, default=None, help="Save the execution trace as JSON")

  args = parser.parse_args(argv)
  set_verbose(args.verbose)

  if args.command == "check":
    return commands.handle_check(args.paths, args.json)

  elif args.command == "fix":
    return commands.handle_fix(args.paths, args.dry_run, args.max_passes, args.json_trace)

  return 1


if __name__ == "__main__":
  raise SystemExit(main())
