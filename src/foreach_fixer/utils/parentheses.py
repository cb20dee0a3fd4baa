"""
Expression Statement Parenthesization.
"""

from tree_sitter import Node

from foreach_fixer.core.source import SourceCode


def should_add_parentheses_to_expression_statement_expression(node: Node, source_code: SourceCode) -> bool:
  """
  Checks whether an expression must be wrapped to be used as a statement.

  An expression statement cannot start with `{`, `function`, `class`,
  `async function` or `let [`; those would be read as a block or a declaration.

  Args:
      node: The expression about to become a statement.
      source_code: The parsed file.
  """
  first = source_code.get_first_token(node)
  if first is None:
    return False
  if first.value in ("{", "function", "class"):
    return True
  if first.value in ("async", "let"):
    following = source_code.get_token_after(first)
    if following is None:
      return False
    if first.value == "async":
      return following.value == "function"
    return following.value == "["
  return False
