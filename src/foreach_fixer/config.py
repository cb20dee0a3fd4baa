"""
Runtime Configuration Store.

Settings are resolved in three layers: built-in defaults, the
`[tool.foreach_fixer]` table of the nearest `pyproject.toml`, and explicit
overrides (usually from the CLI), which win.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

logger = logging.getLogger(__name__)

TOOL_SECTION = "foreach_fixer"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the lint/fix engine.
  """

  extensions: List[str] = Field(
    default_factory=lambda: [".js", ".mjs", ".cjs", ".jsx"],
    description="File suffixes collected when a directory is given.",
  )
  exclude_dirs: List[str] = Field(
    default_factory=lambda: ["node_modules", ".git"],
    description="Directory names skipped while collecting files.",
  )
  max_passes: int = Field(10, ge=1, description="Upper bound on fix passes per file.")
  verify_output: bool = Field(True, description="Re-parse the output of every fix pass.")

  @field_validator("extensions")
  @classmethod
  def normalize_extensions(cls, v: List[str]) -> List[str]:
    """
    Ensures every extension starts with a dot and is lowercase.

    Args:
        v (List[str]): Raw extensions (e.g. ``["js", ".JSX"]``).

    Returns:
        List[str]: Normalized extensions (e.g. ``[".js", ".jsx"]``).
    """
    normalized = []
    for ext in v:
      ext = ext.strip().lower()
      if not ext:
        continue
      normalized.append(ext if ext.startswith(".") else f".{ext}")
    return normalized

  @classmethod
  def load(
    cls,
    max_passes: Optional[int] = None,
    verify_output: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        max_passes (Optional[int]): Override for the fix pass limit.
        verify_output (Optional[bool]): Override for output verification.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.

    Raises:
        pydantic.ValidationError: If a setting has an invalid value.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    settings: Dict[str, Any] = {}
    for key in ("extensions", "exclude_dirs", "max_passes", "verify_output"):
      if key in toml_config:
        settings[key] = toml_config[key]

    if max_passes is not None:
      settings["max_passes"] = max_passes
    if verify_output is not None:
      settings["verify_output"] = verify_output

    return cls(**settings)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches `start_path` and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring unreadable %s: %s", toml_path, e)
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None
