"""
Loop-Head Synthesizer.

Builds the `for (… of …) ` text that replaces everything from the start of the
call up to the callback body.
"""

from typing import Tuple

from tree_sitter import Node

from foreach_fixer.core.nodes import function_parameters, same_node, unwrap_parentheses
from foreach_fixer.core.source import SourceCode


def get_receiver_text(receiver: Node, source_code: SourceCode) -> str:
  """
  Renders the receiver verbatim, keeping one pair of parentheses if it had any.
  """
  inner = unwrap_parentheses(receiver)
  text = source_code.get_text(inner)
  if not same_node(inner, receiver):
    text = f"({text})"
  return text


def get_for_of_loop_head_text(callback: Node, receiver: Node, reassigned: bool, source_code: SourceCode) -> str:
  """
  Synthesizes the loop head.

  Args:
      callback: The callback function (one or two parameters).
      receiver: The receiver expression of the `forEach` call.
      reassigned: Whether a parameter binding is written inside the body.
      source_code: The parsed file.

  Returns:
      str: e.g. ``for (const x of list) `` or ``for (let [i, x] of list.entries()) ``.
  """
  parameters = [source_code.get_text(parameter) for parameter in function_parameters(callback)]
  use_entries = len(parameters) == 2

  binding = f"[{parameters[1]}, {parameters[0]}]" if use_entries else parameters[0]
  text = "for ("
  text += "let" if reassigned else "const"
  text += f" {binding} of {get_receiver_text(receiver, source_code)}"
  if use_entries:
    text += ".entries()"
  text += ") "
  return text


def get_for_of_loop_head_range(call: Node, callback: Node) -> Tuple[int, int]:
  """The byte range replaced by the loop head: call start to callback body start."""
  return call.start_byte, callback.child_by_field_name("body").start_byte
