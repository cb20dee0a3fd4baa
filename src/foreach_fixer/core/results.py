"""
Data structures representing the output of the lint and fix pipelines.

This module defines the Pydantic models handed back to callers: one
`Diagnostic` per reported call site, a `LintResult` per analysed file and a
`FixResult` carrying the rewritten code and the execution trace.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from foreach_fixer.core.fixer import Patch


class Diagnostic(BaseModel):
  """
  A single reported problem.
  """

  rule_id: str = Field(description="Identifier of the reporting rule.")
  message_id: str = Field(description="Key of the message in the rule's catalog.")
  message: str = Field(description="Human readable message.")
  line: int = Field(description="1-based line of the reported node.")
  column: int = Field(description="1-based column of the reported node.")
  end_line: int
  end_column: int
  fix: Optional[Patch] = Field(default=None, description="Attached automatic fix, if it is provably safe.")

  @property
  def fixable(self) -> bool:
    return self.fix is not None


class LintResult(BaseModel):
  """
  Container for the results of linting one source.
  """

  filename: str = Field(default="<input>")
  diagnostics: List[Diagnostic] = Field(default_factory=list)
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  success: bool = Field(default=True, description="True if the source parsed and every rule ran cleanly.")

  @property
  def has_errors(self) -> bool:
    """
    Check if the result contains any error messages.

    Returns:
        True if one or more errors are present.
    """
    return len(self.errors) > 0

  @property
  def fixable_count(self) -> int:
    return sum(1 for diagnostic in self.diagnostics if diagnostic.fixable)


class FixResult(BaseModel):
  """
  Container for the results of fixing one source.
  """

  filename: str = Field(default="<input>")
  code: str = Field(default="", description="The rewritten source code.")
  changed: bool = Field(default=False, description="True if any patch was applied.")
  passes: int = Field(default=0, description="Number of fix passes that applied at least one patch.")
  fixed_count: int = Field(default=0, description="Number of patches applied across all passes.")
  diagnostics: List[Diagnostic] = Field(
    default_factory=list, description="Problems remaining in the rewritten code."
  )
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  success: bool = Field(
    default=True,
    description="True if the pipeline completed without fatal errors.",
  )
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def has_errors(self) -> bool:
    return len(self.errors) > 0
