"""
Return-Statement Transformer.

Inside a `forEach` callback, `return` ends the current element's iteration.
Once the body becomes a loop body the same effect is `continue`:

    return;          ->  continue;
    return foo(x);   ->  foo(x); continue;
    if (a) return b  ->  if (a) { b; continue; }

The value of a `return` is discarded by `forEach`, but evaluating it may have
side effects, so it is kept as an expression statement.
"""

from typing import Iterator

from tree_sitter import Node

from foreach_fixer.core.fixer import EditOperation, RuleFixer
from foreach_fixer.core.nodes import named_children, same_node
from foreach_fixer.core.source import SourceCode
from foreach_fixer.rules.no_array_for_each.messages import RULE_ID
from foreach_fixer.utils.parentheses import should_add_parentheses_to_expression_statement_expression
from foreach_fixer.utils.semicolon import needs_semicolon
from foreach_fixer.utils.tokens import assert_token


def should_switch_return_statement_to_block_statement(return_statement: Node) -> bool:
  """
  Checks whether the return is the sole body of an `if`, `else` or `with`.

  Such a position holds exactly one statement, so the two statements of the
  replacement need braces.
  """
  parent = return_statement.parent
  if parent is None:
    return False
  if parent.type == "if_statement":
    return same_node(parent.child_by_field_name("consequence"), return_statement)
  if parent.type == "else_clause":
    return True
  if parent.type == "with_statement":
    return same_node(parent.child_by_field_name("body"), return_statement)
  return False


def replace_return_statement(
  return_statement: Node, fixer: RuleFixer, source_code: SourceCode
) -> Iterator[EditOperation]:
  """
  Yields the edits turning one `return` into its loop-body equivalent.

  Args:
      return_statement: A `return_statement` node of the callback.
      fixer: Edit factory.
      source_code: The parsed file.

  Raises:
      InternalRuleError: If the statement does not start with a `return` token.
  """
  return_token = assert_token(source_code.get_first_token(return_statement), "return", RULE_ID)

  arguments = named_children(return_statement)
  if not arguments:
    yield fixer.replace_text(return_token, "continue")
    return

  argument = arguments[0]
  next_token = source_code.get_token_after(return_token)
  if source_code.comments_between(return_token.end, next_token.start):
    yield fixer.remove(return_token)
  else:
    yield fixer.remove_range((return_token.start, next_token.start))

  text_before = ""
  text_after = ""
  add_parentheses = should_add_parentheses_to_expression_statement_expression(argument, source_code)
  if add_parentheses:
    text_before = "("
    text_after = ")"

  insert_braces = should_switch_return_statement_to_block_statement(return_statement)
  if insert_braces:
    text_before = "{ " + text_before
  else:
    token_before = source_code.get_token_before(return_token)
    if needs_semicolon(token_before, "(" if add_parentheses else next_token.value):
      text_before = ";" + text_before

  if text_before:
    yield fixer.insert_text_before(next_token, text_before)
  if text_after:
    yield fixer.insert_text_after(argument, text_after)

  last_token = source_code.get_last_token(return_statement)
  if last_token is None or last_token.value != ";":
    yield fixer.insert_text_after(return_statement, ";")
  yield fixer.insert_text_after(return_statement, " continue;")
  if insert_braces:
    yield fixer.insert_text_after(return_statement, " }")
