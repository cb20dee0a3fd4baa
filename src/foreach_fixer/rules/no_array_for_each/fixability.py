"""
Fixability Analysis.

Decides whether a matched `forEach` call can be rewritten into a `for…of`
statement without changing behaviour. Every check is conservative: when in
doubt the call is reported without a fix.

The checks, in order:
1.  Call shape: not parenthesized, not a null-safe call, exactly one argument,
    and the whole expression of a statement.
2.  Callback shape: a non-async, non-generator function expression or arrow
    function with one or two plain parameters.
3.  Receiver: `?.` short-circuiting must survive the rewrite.
4.  Capture: moving a parameter into the loop head must not shadow a name the
    receiver expression refers to.
5.  Control flow: returns inside nested loops cannot become `continue`.
6.  Function-ness: the body must not rely on `this`, `arguments`, its own name,
    or hoisted declarations.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Tuple

from tree_sitter import Node

from foreach_fixer.analysis.function_usage import has_hoisted_declarations, is_function_self_used_inside
from foreach_fixer.analysis.scopes import Scope, ScopeManager, Variable, is_same_or_ancestor
from foreach_fixer.core.errors import InternalRuleError
from foreach_fixer.core.kinds import CALLBACK_KINDS, LOOP_KINDS, PLAIN_PARAMETER_KINDS
from foreach_fixer.core.nodes import (
  call_arguments,
  function_parameters,
  is_async_function,
  is_generator_function,
  is_optional_chain_link,
  is_parenthesized,
  unwrap_parentheses,
)
from foreach_fixer.core.source import SourceCode
from foreach_fixer.enums import DefinitionType
from foreach_fixer.rules.no_array_for_each.matcher import CallSite
from foreach_fixer.rules.no_array_for_each.messages import RULE_ID

logger = logging.getLogger(__name__)


@dataclass
class FunctionInfo:
  """
  Metadata gathered for every function during traversal.
  """

  node: Node
  scope: Scope
  return_statements: List[Node] = field(default_factory=list)
  """Returns whose nearest enclosing function is `node`."""


@dataclass
class FixabilityReport:
  """
  Verdict for one call site.
  """

  fixable: bool
  reason: Optional[str] = None
  callback: Optional[Node] = None
  return_statements: List[Node] = field(default_factory=list)
  reassigned: bool = False
  """True if any parameter binding is written inside the callback."""

  @classmethod
  def reject(cls, reason: str) -> "FixabilityReport":
    return cls(fixable=False, reason=reason)


def is_static_reference(node: Node) -> bool:
  """
  Checks whether evaluating `node` twice is free of side effects.

  Accepts identifiers, `this` and chains of non-computed or literal-indexed
  member accesses on them (optional links included).
  """
  node = unwrap_parentheses(node)
  if node.type in ("identifier", "this"):
    return True
  if node.type == "member_expression":
    prop = node.child_by_field_name("property")
    if prop is None or prop.type not in ("property_identifier", "private_property_identifier"):
      return False
    return is_static_reference(node.child_by_field_name("object"))
  if node.type == "subscript_expression":
    index = node.child_by_field_name("index")
    if index is None or index.type not in ("string", "number"):
      return False
    return is_static_reference(node.child_by_field_name("object"))
  return False


def contains_optional_chain(node: Node) -> bool:
  """
  Checks whether the member/call chain ending at `node` short-circuits on `?.`.

  Grouping parentheses end a chain, so a parenthesized receiver never counts.
  """
  while node.type in ("member_expression", "subscript_expression", "call_expression"):
    if is_optional_chain_link(node):
      return True
    child = node.child_by_field_name("function" if node.type == "call_expression" else "object")
    if child is None:
      return False
    node = child
  return False


class FixabilityAnalyzer:
  """
  Classifies call sites once the whole file has been traversed.

  Args:
      source_code: The parsed file.
      scope_manager: Scope model of the file.
      function_info: FunctionInfo by function node id.
      identifiers: Every reference identifier of the file, in document order.
  """

  def __init__(
    self,
    source_code: SourceCode,
    scope_manager: ScopeManager,
    function_info: Mapping[int, FunctionInfo],
    identifiers: Sequence[Node],
  ):
    self.source_code = source_code
    self.scope_manager = scope_manager
    self.function_info = function_info
    self.identifiers = identifiers

  def analyze(self, call_site: CallSite) -> FixabilityReport:
    """
    Runs every check against a call site.

    Returns:
        FixabilityReport: `fixable=True` with the callback, its returns and the
        reassignment flag, or `fixable=False` with the rejection reason.

    Raises:
        InternalRuleError: If the callback was never seen during traversal.
    """
    call = call_site.node
    callee = call_site.callee

    if is_optional_chain_link(call):
      return FixabilityReport.reject("call is null-safe (`?.()`)")
    if is_parenthesized(call):
      return FixabilityReport.reject("call is parenthesized")
    arguments = call_arguments(call)
    if arguments is None or len(arguments) != 1:
      return FixabilityReport.reject("call does not take exactly one argument")
    statement = call.parent
    if statement is None or statement.type != "expression_statement":
      return FixabilityReport.reject("call is not a standalone statement")

    callback = unwrap_parentheses(arguments[0])
    if callback.type not in CALLBACK_KINDS:
      return FixabilityReport.reject("argument is not an inline function")
    if is_async_function(callback) or is_generator_function(callback):
      return FixabilityReport.reject("callback is async or a generator")
    parameters = function_parameters(callback)
    if len(parameters) not in (1, 2) or any(p.type not in PLAIN_PARAMETER_KINDS for p in parameters):
      return FixabilityReport.reject("callback parameters cannot form a loop binding")

    receiver = call_site.receiver
    if is_optional_chain_link(callee):
      if not is_static_reference(receiver):
        return FixabilityReport.reject("null-safe receiver would be evaluated twice")
    elif contains_optional_chain(receiver):
      return FixabilityReport.reject("receiver short-circuits on `?.`")

    info = self.function_info.get(callback.id)
    if info is None:
      raise InternalRuleError("Callback function was not visited during traversal.", RULE_ID)

    variables = self.scope_manager.get_declared_variables(callback)
    if not self._is_parameters_safe_to_fix(variables, call_site.scope, receiver):
      return FixabilityReport.reject("a parameter would capture a name used by the receiver")
    if any(self._is_inside_loop(statement_node, callback) for statement_node in info.return_statements):
      return FixabilityReport.reject("a return statement is nested inside a loop")
    if is_function_self_used_inside(callback, info.scope):
      return FixabilityReport.reject("callback uses `this`, `arguments` or its own name")
    if has_hoisted_declarations(info.scope):
      return FixabilityReport.reject("callback declares hoisted bindings")

    reassigned = any(
      variable.is_reassigned for variable in variables if variable.defs[0].type is DefinitionType.PARAMETER
    )
    return FixabilityReport(
      fixable=True,
      callback=callback,
      return_statements=list(info.return_statements),
      reassigned=reassigned,
    )

  def _is_parameters_safe_to_fix(self, variables: List[Variable], call_scope: Scope, receiver: Node) -> bool:
    if any(len(variable.defs) != 1 for variable in variables):
      return False
    parameter_names = {
      variable.name for variable in variables if variable.defs[0].type is DefinitionType.PARAMETER
    }
    if not parameter_names:
      return True

    # Resolve every binding the receiver refers to before comparing names.
    bindings = self._receiver_bindings(call_scope, receiver)
    for name, variable in bindings:
      if name not in parameter_names:
        continue
      if variable is None or is_same_or_ancestor(variable.scope, call_scope):
        logger.debug("Parameter '%s' would shadow a binding used by the receiver", name)
        return False
    return True

  def _receiver_bindings(self, call_scope: Scope, receiver: Node) -> List[Tuple[str, Optional[Variable]]]:
    start, end = receiver.start_byte, receiver.end_byte
    return [
      (self.source_code.get_text(identifier), self.scope_manager.find_variable(call_scope, identifier))
      for identifier in self.identifiers
      if start <= identifier.start_byte and identifier.end_byte <= end
    ]

  @staticmethod
  def _is_inside_loop(node: Node, callback: Node) -> bool:
    current = node.parent
    while current is not None and current.id != callback.id:
      if current.type in LOOP_KINDS:
        return True
      current = current.parent
    return False
