"""
Fix Command Handler.

This module implements the `foreach-fixer fix` command. It orchestrates:
1. Configuration loading (pyproject.toml + CLI overrides).
2. File collection.
3. Fixing via the Engine.
4. Output writing (or a unified diff for `--dry-run`) and trace logging.
"""

import difflib
import json
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError
from rich.table import Table

from foreach_fixer.config import RuntimeConfig
from foreach_fixer.core.engine import LintEngine
from foreach_fixer.core.results import FixResult
from foreach_fixer.utils.console import console, log_error, log_info, log_success, log_warning
from foreach_fixer.utils.files import collect_source_files


def handle_fix(
  paths: List[Path],
  dry_run: bool = False,
  max_passes: Optional[int] = None,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Rewrites fixable `forEach` statements in place.

  Args:
      paths: Files or directories to fix.
      dry_run: Print a unified diff instead of writing files.
      max_passes: Override for the fix pass limit.
      json_trace_path: Where to save the trace events (single file runs only
          keep the last file's trace).

  Returns:
      int: 1 if any file failed, 0 otherwise.
  """
  try:
    config = RuntimeConfig.load(max_passes=max_passes)
  except ValidationError as e:
    log_error(f"Invalid configuration: {e}")
    return 1

  files = collect_source_files(paths, config)
  if not files:
    log_warning("No JavaScript files found.")
    return 0

  engine = LintEngine(config=config)
  results: Dict[str, FixResult] = {}
  for file_path in files:
    results[str(file_path)] = _fix_single_file(engine, file_path, dry_run, json_trace_path)

  _print_batch_summary(results)
  return 1 if any(not result.success for result in results.values()) else 0


def _fix_single_file(
  engine: LintEngine,
  input_path: Path,
  dry_run: bool,
  json_trace_path: Optional[Path] = None,
) -> FixResult:
  """
  Helper to execute the fix loop on a single file.

  Args:
      engine: Configured engine.
      input_path: Source file path.
      dry_run: Whether to print a diff instead of writing.
      json_trace_path: Path to save trace event logs.

  Returns:
      FixResult: Result object containing status and code.
  """
  try:
    code = input_path.read_text(encoding="utf-8")
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Cannot read [path]{input_path}[/path]: {e}")
    return FixResult(filename=str(input_path), errors=[str(e)], success=False)

  result = engine.fix(code, filename=str(input_path))

  if json_trace_path and result.trace_events:
    try:
      json_trace_path.parent.mkdir(parents=True, exist_ok=True)
      with open(json_trace_path, "wt", encoding="utf-8") as f:
        json.dump(result.trace_events, f, indent=2)
      log_info(f"Trace saved to [path]{json_trace_path}[/path]")
    except OSError as e:
      log_error(f"Failed to write trace: {e}")

  if not result.changed:
    return result

  if dry_run:
    diff = difflib.unified_diff(
      code.splitlines(keepends=True),
      result.code.splitlines(keepends=True),
      fromfile=str(input_path),
      tofile=str(input_path),
    )
    console.print("".join(diff), markup=False, highlight=False, end="")
  else:
    input_path.write_text(result.code, encoding="utf-8")
    log_success(f"Fixed {result.fixed_count} statement(s) in [path]{input_path}[/path]")

  return result


def _print_batch_summary(results: Dict[str, FixResult]) -> None:
  """
  Renders a summary table of fix results to the console.

  Args:
      results: Dictionary mapping filenames to fix results.
  """
  total = len(results)
  fixed = sum(result.fixed_count for result in results.values())
  remaining = sum(len(result.diagnostics) for result in results.values())
  failures = sum(1 for result in results.values() if not result.success)

  if failures == 0 and remaining == 0:
    log_success(f"Batch Complete: {fixed} fix(es) applied across {total} file(s).")
    return

  table = Table(title="Fix Report")
  table.add_column("File", style="cyan")
  table.add_column("Fixed", justify="right")
  table.add_column("Remaining", justify="right")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in results.items():
    if res.success and not res.diagnostics:
      continue
    status = "❌ Failed" if not res.success else "⚠️ Unfixable"
    issues = "; ".join(res.errors) if res.errors else ""
    table.add_row(filename, str(res.fixed_count), str(len(res.diagnostics)), status, issues)

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {fixed} fixed, {remaining} remaining, {failures} failed.")
