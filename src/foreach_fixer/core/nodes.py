"""
Syntax Node Helpers.

Small, stateless queries over tree-sitter nodes shared by the scope analyser and
the rules: comment-free child lists, identity checks, parenthesis unwrapping and
function signature access.
"""

from typing import Iterator, List, Optional

from tree_sitter import Node

from foreach_fixer.core.kinds import COMMENT_KINDS


def named_children(node: Optional[Node]) -> List[Node]:
  """
  Returns the named children of a node, excluding comments.

  Args:
      node: The parent node (None yields an empty list).

  Returns:
      List[Node]: Children in document order.
  """
  if node is None:
    return []
  return [child for child in node.named_children if child.type not in COMMENT_KINDS]


def same_node(a: Optional[Node], b: Optional[Node]) -> bool:
  """Identity comparison for nodes of the same tree."""
  return a is not None and b is not None and a.id == b.id


def descendants(node: Node) -> Iterator[Node]:
  """Yields the named descendants of `node` (excluding itself) in document order."""
  stack = list(reversed(named_children(node)))
  while stack:
    current = stack.pop()
    yield current
    stack.extend(reversed(named_children(current)))


def is_parenthesized(node: Node) -> bool:
  """
  Checks whether a node is wrapped in redundant grouping parentheses.

  tree-sitter keeps grouping as explicit `parenthesized_expression` nodes, so
  this is a parent check rather than a token scan.
  """
  parent = node.parent
  return parent is not None and parent.type == "parenthesized_expression"


def unwrap_parentheses(node: Node) -> Node:
  """
  Strips any number of grouping parentheses around an expression.

  Args:
      node: The possibly parenthesized expression.

  Returns:
      Node: The innermost non-parenthesized expression.
  """
  while node.type == "parenthesized_expression":
    inner = named_children(node)
    if len(inner) != 1:
      break
    node = inner[0]
  return node


def function_parameters(function_node: Node) -> List[Node]:
  """
  Lists the formal parameters of a function-like node.

  Handles both the bare arrow form (`x => …`) and parenthesized lists.
  """
  single = function_node.child_by_field_name("parameter")
  if single is not None:
    return [single]
  return named_children(function_node.child_by_field_name("parameters"))


def is_async_function(function_node: Node) -> bool:
  """True if the function value carries the `async` modifier."""
  return any(not child.is_named and child.type == "async" for child in function_node.children)


def is_generator_function(function_node: Node) -> bool:
  """True for `function*` values."""
  if function_node.type in ("generator_function", "generator_function_declaration"):
    return True
  return any(not child.is_named and child.type == "*" for child in function_node.children)


def call_arguments(call_node: Node) -> Optional[List[Node]]:
  """
  Returns the argument expressions of a call.

  Returns:
      Optional[List[Node]]: None for tagged templates, which have no argument list.
  """
  arguments = call_node.child_by_field_name("arguments")
  if arguments is None or arguments.type != "arguments":
    return None
  return named_children(arguments)


def is_optional_chain_link(node: Node) -> bool:
  """True if this member access or call is written with `?.`."""
  return node.child_by_field_name("optional_chain") is not None
