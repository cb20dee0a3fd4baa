"""
Automatic Semicolon Insertion Helpers.

When a fix moves code so that a statement begins with a character such as
`(` or `[`, the previous line may silently continue into it if it relied on
automatic semicolon insertion:

    foo()
    [a, b].forEach(...)     // parsed as foo()[a, b]...

`needs_semicolon` decides whether a `;` must be inserted in front of the new
code to keep the statements apart.
"""

from typing import Optional

from foreach_fixer.core.kinds import FUNCTION_EXPRESSION_KINDS
from foreach_fixer.core.nodes import same_node
from foreach_fixer.core.source import Token
from foreach_fixer.enums import TokenType

# Characters that continue an expression when a line starts with them.
_CONTINUATION_CHARACTERS = frozenset("[(/`+-*,.")

_VALUE_TOKEN_TYPES = frozenset(
  {
    TokenType.IDENTIFIER,
    TokenType.STRING,
    TokenType.NUMERIC,
    TokenType.REGULAR_EXPRESSION,
    TokenType.TEMPLATE,
    TokenType.BOOLEAN,
    TokenType.NULL,
  }
)

_HEAD_FIELDS = {
  "if_statement": "condition",
  "while_statement": "condition",
  "with_statement": "object",
}


def _closes_statement_head(token: Token) -> bool:
  """True if a `)` ends the head of an `if`/`while`/`with`/`for` statement."""
  owner = token.node.parent
  if owner is None:
    return False
  if owner.type in ("for_statement", "for_in_statement"):
    return True
  if owner.type == "parenthesized_expression" and owner.parent is not None:
    head_field = _HEAD_FIELDS.get(owner.parent.type)
    return head_field is not None and same_node(owner.parent.child_by_field_name(head_field), owner)
  return False


def _closes_expression(token: Token) -> bool:
  """True if a `}` ends an expression rather than a block statement."""
  owner = token.node.parent
  if owner is None:
    return False
  if owner.type in ("object", "object_pattern"):
    return True
  if owner.type == "class_body":
    return owner.parent is not None and owner.parent.type == "class"
  if owner.type == "statement_block":
    function = owner.parent
    return function is not None and (function.type in FUNCTION_EXPRESSION_KINDS or function.type == "arrow_function")
  return False


def needs_semicolon(token_before: Optional[Token], code: str) -> bool:
  """
  Checks whether `code` placed right after `token_before` needs a leading `;`.

  Args:
      token_before: The last token preceding the insertion point.
      code: The text about to start at the insertion point.

  Returns:
      bool: True if the previous statement would otherwise continue into `code`.
  """
  if not code or code[0] not in _CONTINUATION_CHARACTERS:
    return False
  if token_before is None:
    return False

  value = token_before.value
  if token_before.type is TokenType.PUNCTUATOR:
    if value == ";":
      return False
    if value == "]":
      return True
    if value == ")":
      return not _closes_statement_head(token_before)
    if value == "}":
      return _closes_expression(token_before)
    return value in ("++", "--", "`")

  if token_before.type in _VALUE_TOKEN_TYPES:
    return True
  if token_before.type is TokenType.KEYWORD:
    return value in ("this", "super")
  return False
