"""
Tree Traversal.

Depth-first walk over the named nodes of a tree-sitter tree that dispatches
enter and exit events to a listener table, in the manner of ESLint rule
listeners:

- ``"call_expression"`` is invoked when a node of that kind is entered.
- ``"call_expression:exit"`` is invoked after all of its children were visited.
- ``"program:exit"`` therefore fires once, after the whole file.

The walk uses an explicit stack so deeply nested sources cannot exhaust the
interpreter's recursion limit.
"""

from typing import Callable, Dict, List, Mapping, Tuple

from tree_sitter import Node

from foreach_fixer.core.nodes import named_children

Listener = Callable[[Node], None]


class Traverser:
  """
  Dispatches node enter/exit events to listener callbacks.

  Args:
      listeners: Mapping of ``kind`` / ``kind:exit`` keys to callbacks.
  """

  def __init__(self, listeners: Mapping[str, Listener]):
    self._listeners: Dict[str, Listener] = dict(listeners)

  def traverse(self, root: Node) -> None:
    """
    Walks the tree rooted at `root` in document order.

    Args:
        root: Usually the `program` node.
    """
    stack: List[Tuple[Node, bool]] = [(root, False)]
    while stack:
      node, leaving = stack.pop()
      if leaving:
        self._dispatch(f"{node.type}:exit", node)
        continue
      self._dispatch(node.type, node)
      stack.append((node, True))
      for child in reversed(named_children(node)):
        stack.append((child, False))

  def _dispatch(self, key: str, node: Node) -> None:
    listener = self._listeners.get(key)
    if listener is not None:
      listener(node)
