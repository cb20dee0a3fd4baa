"""
Error Types.

Expected conditions (an unfixable call site, a file without matches) never raise.
The exceptions below are reserved for input the engine cannot analyse at all and
for internal consistency failures of a rule, which must never be turned into a
silently wrong patch.
"""

from typing import Optional


class SourceParseError(ValueError):
  """
  Raised when the JavaScript source contains syntax errors.

  Attributes:
      line (int): 1-based line of the first error node.
      column (int): 1-based column of the first error node.
  """

  def __init__(self, message: str, line: int = 0, column: int = 0):
    super().__init__(message)
    self.line = line
    self.column = column


class InternalRuleError(RuntimeError):
  """
  Raised when a rule meets a tree shape it does not expect.

  This indicates a bug in the rule, not a problem in the analysed code.
  """

  def __init__(self, message: str, rule_id: Optional[str] = None):
    if rule_id:
      message = f"{message} (rule: {rule_id})"
    super().__init__(message)
    self.rule_id = rule_id


class FixVerificationError(InternalRuleError):
  """
  Raised when applying a fix pass produces source that no longer parses.
  """
