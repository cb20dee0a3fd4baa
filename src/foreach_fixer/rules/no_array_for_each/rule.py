"""
The `no-array-for-each` Rule.

Reports every `<receiver>.forEach(<callback>)` statement and, where the rewrite
is provably safe, attaches a fix turning it into a `for…of` loop.

Data is gathered in a single traversal:
- function enter/exit maintains a stack, so each `return` is attributed to its
  immediately enclosing function;
- every reference identifier is recorded for the capture check;
- matching calls are recorded as call sites.

Classification and fix composition happen on `program:exit`, once all returns
and identifiers of the file are known.
"""

import logging
from typing import Dict, List

from tree_sitter import Node

from foreach_fixer.core.context import RuleContext
from foreach_fixer.core.kinds import FUNCTION_KINDS, REFERENCE_IDENTIFIER_KINDS
from foreach_fixer.core.tracer import get_tracer
from foreach_fixer.core.traversal import Listener
from foreach_fixer.rules.base import Rule, register_rule
from foreach_fixer.rules.no_array_for_each.composer import ForOfFixComposer
from foreach_fixer.rules.no_array_for_each.fixability import FixabilityAnalyzer, FunctionInfo
from foreach_fixer.rules.no_array_for_each.matcher import CallSite, CallSiteMatcher
from foreach_fixer.rules.no_array_for_each.messages import MESSAGE_ID, MESSAGES, RULE_ID

logger = logging.getLogger(__name__)


@register_rule
class NoArrayForEachRule(Rule):
  """
  Prefer `for…of` over `Array#forEach(…)`.
  """

  rule_id = RULE_ID
  messages = MESSAGES
  fixable = True

  def __init__(self, context: RuleContext):
    super().__init__(context)
    self._function_stack: List[Node] = []
    self._function_info: Dict[int, FunctionInfo] = {}
    self._identifiers: List[Node] = []
    self._call_sites: List[CallSite] = []
    self._matcher = CallSiteMatcher(context.source_code, context.scope_manager)

  def listeners(self) -> Dict[str, Listener]:
    table: Dict[str, Listener] = {
      "return_statement": self._on_return_statement,
      "call_expression": self._on_call_expression,
      "program:exit": self._on_program_exit,
    }
    for kind in FUNCTION_KINDS:
      table[kind] = self._on_function_enter
      table[f"{kind}:exit"] = self._on_function_exit
    for kind in REFERENCE_IDENTIFIER_KINDS:
      table[kind] = self._on_identifier
    return table

  def _on_function_enter(self, node: Node) -> None:
    self._function_stack.append(node)
    scope = self.context.scope_manager.acquire(node)
    self._function_info[node.id] = FunctionInfo(node=node, scope=scope)

  def _on_function_exit(self, node: Node) -> None:
    self._function_stack.pop()

  def _on_return_statement(self, node: Node) -> None:
    if not self._function_stack:
      return
    self._function_info[self._function_stack[-1].id].return_statements.append(node)

  def _on_identifier(self, node: Node) -> None:
    if self.context.scope_manager.reference_for(node) is not None:
      self._identifiers.append(node)

  def _on_call_expression(self, node: Node) -> None:
    call_site = self._matcher.match(node)
    if call_site is not None:
      self._call_sites.append(call_site)

  def _on_program_exit(self, node: Node) -> None:
    source = self.context.source_code
    analyzer = FixabilityAnalyzer(source, self.context.scope_manager, self._function_info, self._identifiers)
    composer = ForOfFixComposer(source)
    tracer = get_tracer()

    for call_site in self._call_sites:
      report = analyzer.analyze(call_site)
      label = source.get_text(call_site.callee)
      if report.fixable:
        tracer.log_inspection(label, "fixable")
        fix = composer.compose(call_site.node, report)
      else:
        logger.debug("Not fixing '%s': %s", label, report.reason)
        tracer.log_inspection(label, "reported", report.reason or "")
        fix = None
      self.context.report(call_site.method, MESSAGE_ID, fix)
