"""
Check Command Handler.

This module implements the `foreach-fixer check` command: lint every collected
file and report the diagnostics, either as a rich table or as JSON.
"""

import json
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError
from rich.table import Table

from foreach_fixer.config import RuntimeConfig
from foreach_fixer.core.engine import LintEngine
from foreach_fixer.core.results import LintResult
from foreach_fixer.utils.console import console, log_error, log_success, log_warning
from foreach_fixer.utils.files import collect_source_files


def handle_check(paths: List[Path], as_json: bool = False) -> int:
  """
  Lints files and reports every `forEach` statement found.

  Args:
      paths: Files or directories to check.
      as_json: Print machine-readable JSON instead of a table.

  Returns:
      int: 1 if any diagnostic or error was found, 0 otherwise.
  """
  try:
    config = RuntimeConfig.load()
  except ValidationError as e:
    log_error(f"Invalid configuration: {e}")
    return 1

  files = collect_source_files(paths, config)
  if not files:
    log_warning("No JavaScript files found.")
    return 0

  engine = LintEngine(config=config)
  results: Dict[str, LintResult] = {}
  for file_path in files:
    try:
      code = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
      log_error(f"Cannot read [path]{file_path}[/path]: {e}")
      results[str(file_path)] = LintResult(filename=str(file_path), errors=[str(e)], success=False)
      continue
    results[str(file_path)] = engine.lint(code, filename=str(file_path))

  if as_json:
    _print_json_report(results)
  else:
    _print_diagnostics_table(results)

  failed = any(result.diagnostics or result.has_errors for result in results.values())
  return 1 if failed else 0


def _print_json_report(results: Dict[str, LintResult]) -> None:
  payload = []
  for result in results.values():
    payload.append(
      {
        "file": result.filename,
        "success": result.success,
        "errors": result.errors,
        "diagnostics": [
          {**diagnostic.model_dump(exclude={"fix"}), "fixable": diagnostic.fixable} for diagnostic in result.diagnostics
        ],
      }
    )
  print(json.dumps(payload, indent=2))


def _print_diagnostics_table(results: Dict[str, LintResult]) -> None:
  """
  Renders the diagnostics of all files as one table.

  Args:
      results: Dictionary mapping filenames to lint results.
  """
  total = sum(len(result.diagnostics) for result in results.values())
  fixable = sum(result.fixable_count for result in results.values())

  for result in results.values():
    for error in result.errors:
      log_error(f"[path]{result.filename}[/path]: {error}")

  if total == 0:
    log_success(f"No `forEach` statements found in {len(results)} file(s).")
    return

  table = Table(title="forEach Report")
  table.add_column("File", style="cyan")
  table.add_column("Location", justify="right")
  table.add_column("Rule", style="magenta")
  table.add_column("Message")
  table.add_column("Fixable", justify="center")

  for result in results.values():
    for diagnostic in result.diagnostics:
      table.add_row(
        result.filename,
        f"{diagnostic.line}:{diagnostic.column}",
        diagnostic.rule_id,
        diagnostic.message,
        "✅" if diagnostic.fixable else "-",
      )

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {total} problem(s), {fixable} fixable with `foreach-fixer fix`.")
