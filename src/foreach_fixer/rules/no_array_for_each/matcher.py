"""
Call Site Matcher.

Recognises `<receiver>.forEach(…)` calls in the three spellings

- ``a.forEach(cb)``
- ``a?.forEach(cb)`` (null-safe member access)
- ``a.forEach?.(cb)`` (null-safe call)

and drops receivers from a fixed allowlist of libraries whose `forEach` is not
`Array#forEach`.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from tree_sitter import Node

from foreach_fixer.analysis.scopes import Scope, ScopeManager
from foreach_fixer.core.nodes import is_optional_chain_link, unwrap_parentheses
from foreach_fixer.core.source import SourceCode

METHOD_NAME = "forEach"

IGNORED_RECEIVERS = ("React.Children", "Children", "R", "pIteration")


@dataclass
class CallSite:
  """
  A matched `forEach` call, recorded during traversal.
  """

  node: Node
  """The `call_expression` node."""

  scope: Scope
  """Innermost scope containing the call."""

  @property
  def callee(self) -> Node:
    return self.node.child_by_field_name("function")

  @property
  def receiver(self) -> Node:
    return self.callee.child_by_field_name("object")

  @property
  def method(self) -> Node:
    return self.callee.child_by_field_name("property")


def is_method_call(node: Node, method: str, source_code: SourceCode) -> bool:
  """
  Checks whether `node` is a call of a non-computed member named `method`.

  Tagged templates (``a.forEach`x```) are not calls.
  """
  if node.type != "call_expression":
    return False
  arguments = node.child_by_field_name("arguments")
  if arguments is None or arguments.type != "arguments":
    return False
  callee = node.child_by_field_name("function")
  if callee is None or callee.type != "member_expression":
    return False
  prop = callee.child_by_field_name("property")
  return prop is not None and prop.type == "property_identifier" and source_code.get_text(prop) == method


def static_member_path(node: Node, source_code: SourceCode) -> Optional[str]:
  """
  Renders `a.b.c` style references as a dotted path.

  Returns:
      Optional[str]: The path, or None for anything but plain identifiers joined
      by non-optional, non-computed member accesses.
  """
  node = unwrap_parentheses(node)
  if node.type == "identifier":
    return source_code.get_text(node)
  if node.type == "member_expression" and not is_optional_chain_link(node):
    prop = node.child_by_field_name("property")
    if prop is None or prop.type != "property_identifier":
      return None
    head = static_member_path(node.child_by_field_name("object"), source_code)
    if head is None:
      return None
    return f"{head}.{source_code.get_text(prop)}"
  return None


def is_node_matches(node: Node, names: Iterable[str], source_code: SourceCode) -> bool:
  path = static_member_path(node, source_code)
  return path is not None and path in names


class CallSiteMatcher:
  """
  Turns `call_expression` nodes into `CallSite` records.

  Args:
      source_code: The parsed file.
      scope_manager: Scope model of the file.
  """

  def __init__(self, source_code: SourceCode, scope_manager: ScopeManager):
    self.source_code = source_code
    self.scope_manager = scope_manager

  def match(self, node: Node) -> Optional[CallSite]:
    """
    Returns a `CallSite` if `node` is a reportable `forEach` call.
    """
    if not is_method_call(node, METHOD_NAME, self.source_code):
      return None
    receiver = node.child_by_field_name("function").child_by_field_name("object")
    if is_node_matches(receiver, IGNORED_RECEIVERS, self.source_code):
      return None
    return CallSite(node=node, scope=self.scope_manager.innermost_scope(node))
