"""
Rule Execution Context.

The `RuleContext` is the single object a rule talks to while it runs: it
exposes the parsed source and scope model, and collects the rule's reports.
Fix functions attached to a report are materialised into a `Patch` right away,
so a rule bug surfaces at the report that caused it.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from tree_sitter import Node

from foreach_fixer.analysis.scopes import ScopeManager
from foreach_fixer.core.errors import InternalRuleError
from foreach_fixer.core.fixer import EditOperation, Patch, RuleFixer
from foreach_fixer.core.results import Diagnostic
from foreach_fixer.core.source import SourceCode

logger = logging.getLogger(__name__)

FixFunction = Callable[[RuleFixer], Iterable[EditOperation]]


class RuleContext:
  """
  Per-run state shared between the engine and one rule instance.

  Attributes:
      rule_id (str): Identifier of the running rule.
      messages (Dict[str, str]): The rule's message catalog.
      source_code (SourceCode): The parsed file.
      scope_manager (ScopeManager): Scope model of the file.
      diagnostics (List[Diagnostic]): Reports collected so far.
      errors (List[str]): Internal rule errors raised while building fixes.
  """

  def __init__(
    self,
    rule_id: str,
    messages: Dict[str, str],
    source_code: SourceCode,
    scope_manager: ScopeManager,
  ):
    self.rule_id = rule_id
    self.messages = messages
    self.source_code = source_code
    self.scope_manager = scope_manager
    self.fixer = RuleFixer()
    self.diagnostics: List[Diagnostic] = []
    self.errors: List[str] = []

  def report(self, node: Node, message_id: str, fix: Optional[FixFunction] = None) -> Diagnostic:
    """
    Records a diagnostic located on `node`.

    Args:
        node: The node to highlight.
        message_id: Key into the rule's message catalog.
        fix: Optional generator function producing the edits of the fix.

    Returns:
        Diagnostic: The recorded report. Its `fix` is None if the fix function
        raised an `InternalRuleError`.
    """
    if message_id not in self.messages:
      raise InternalRuleError(f"Unknown message id '{message_id}'.", self.rule_id)

    patch = None
    if fix is not None:
      try:
        patch = Patch.from_edits(fix(self.fixer), self.source_code)
      except InternalRuleError as e:
        logger.error("Dropping fix at byte %d: %s", node.start_byte, e)
        self.errors.append(str(e))

    line, column = self.source_code.get_location(node.start_byte)
    end_line, end_column = self.source_code.get_location(node.end_byte)
    diagnostic = Diagnostic(
      rule_id=self.rule_id,
      message_id=message_id,
      message=self.messages[message_id],
      line=line,
      column=column,
      end_line=end_line,
      end_column=end_column,
      fix=patch,
    )
    self.diagnostics.append(diagnostic)
    return diagnostic
