"""
Source File Collection.
"""

from pathlib import Path
from typing import Iterable, List

from foreach_fixer.config import RuntimeConfig


def collect_source_files(paths: Iterable[Path], config: RuntimeConfig) -> List[Path]:
  """
  Expands CLI path arguments into the list of files to process.

  Explicit files are always included. Directories are searched recursively for
  files with a configured extension, skipping excluded directory names.

  Args:
      paths: Files and/or directories.
      config: Supplies `extensions` and `exclude_dirs`.

  Returns:
      List[Path]: Unique files, in argument order then sorted within directories.
  """
  found: List[Path] = []
  excluded = set(config.exclude_dirs)
  for path in paths:
    if path.is_file():
      found.append(path)
      continue
    if not path.is_dir():
      continue
    for candidate in sorted(path.rglob("*")):
      if not candidate.is_file() or candidate.suffix.lower() not in config.extensions:
        continue
      if any(part in excluded for part in candidate.relative_to(path).parts[:-1]):
        continue
      found.append(candidate)
  return list(dict.fromkeys(found))
