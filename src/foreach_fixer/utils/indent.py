"""
Indentation Helpers.
"""

from foreach_fixer.core.source import SourceCode

DEFAULT_INDENT_UNIT = "\t"


def detect_indent_unit(source_code: SourceCode, start: int, end: int, base_indent: str) -> str:
  """
  Guesses one indentation step from the lines of a region.

  Returns the extra leading whitespace of the first line in `(start, end)` that
  is indented deeper than `base_indent`, or a tab when no line is.

  Args:
      source_code: The parsed file.
      start: Region start offset.
      end: Region end offset.
      base_indent: Indentation of the enclosing statement.
  """
  for line_start in source_code.line_starts_between(start, end):
    indent = source_code.get_indent(line_start)
    if indent.startswith(base_indent) and len(indent) > len(base_indent):
      return indent[len(base_indent) :]
  return DEFAULT_INDENT_UNIT


def is_blank_line(source_code: SourceCode, line_start: int) -> bool:
  """True if the line beginning at `line_start` holds only whitespace."""
  data = source_code.source_bytes
  cursor = line_start
  while cursor < len(data) and data[cursor : cursor + 1] in (b" ", b"\t"):
    cursor += 1
  return cursor == len(data) or data[cursor : cursor + 1] in (b"\n", b"\r")
