"""
Edit Composer.

Assembles the complete list of edits that rewrites a fixable `forEach` call
statement into a `for…of` statement. The null-safe member form
(`a?.forEach(…)`) is additionally wrapped in a guard:

    if (a != null) {
    	for (const x of a) …
    }

The edits are produced lazily; `Patch.from_edits` orders and merges them.
"""

import re
from typing import Iterator, List, Tuple

from tree_sitter import Node

from foreach_fixer.core.fixer import EditOperation, RuleFixer
from foreach_fixer.core.kinds import STATEMENT_LIST_KINDS
from foreach_fixer.core.nodes import call_arguments, descendants, is_optional_chain_link
from foreach_fixer.core.source import SourceCode
from foreach_fixer.rules.no_array_for_each.fixability import FixabilityReport
from foreach_fixer.rules.no_array_for_each.loop_head import (
  get_for_of_loop_head_range,
  get_for_of_loop_head_text,
  get_receiver_text,
)
from foreach_fixer.rules.no_array_for_each.messages import RULE_ID
from foreach_fixer.rules.no_array_for_each.returns import replace_return_statement
from foreach_fixer.utils.indent import detect_indent_unit, is_blank_line
from foreach_fixer.utils.parentheses import should_add_parentheses_to_expression_statement_expression
from foreach_fixer.utils.tokens import assert_token

_WORD_CHARACTER = re.compile(rb"[\w$\x80-\xff]")


class ForOfFixComposer:
  """
  Produces the fix function for one call site.

  Args:
      source_code: The parsed file.
  """

  def __init__(self, source_code: SourceCode):
    self.source_code = source_code

  def compose(self, call: Node, report: FixabilityReport):
    """
    Returns a fix function for `RuleContext.report`.

    Args:
        call: The `call_expression` node.
        report: A fixable verdict for the call.
    """

    def fix(fixer: RuleFixer) -> Iterator[EditOperation]:
      yield from self._edits(fixer, call, report)

    return fix

  def _edits(self, fixer: RuleFixer, call: Node, report: FixabilityReport) -> Iterator[EditOperation]:
    source = self.source_code
    statement = call.parent
    callee = call.child_by_field_name("function")
    receiver = callee.child_by_field_name("object")
    argument = call_arguments(call)[0]
    callback = report.callback
    body = callback.child_by_field_name("body")
    is_block = body.type == "statement_block"
    guarded = is_optional_chain_link(callee)
    # A guard in a bare statement position could capture a following `else`.
    braced = guarded and statement.parent is not None and statement.parent.type not in STATEMENT_LIST_KINDS
    indent = self._base_indent(statement, callback)

    yield from self._fix_space_before(fixer, statement)

    unit = ""
    if guarded:
      unit = detect_indent_unit(source, body.start_byte, call.end_byte, indent)
      receiver_text = get_receiver_text(receiver, source)
      if braced:
        yield fixer.insert_text_before(call, "{ ")
      yield fixer.insert_text_before(call, f"if ({receiver_text} != null) {{\n{indent}{unit}")

    yield fixer.replace_text_range(
      get_for_of_loop_head_range(call, callback),
      get_for_of_loop_head_text(callback, receiver, report.reassigned, source),
    )

    if not is_block and should_add_parentheses_to_expression_statement_expression(body, source):
      yield fixer.insert_text_before(body, "(")
      yield fixer.insert_text_after(body, ")")
    if guarded and not is_block:
      yield fixer.insert_text_after(body, ";")

    # Closing parentheses of a parenthesized callback, an optional trailing
    # comma, then the call's own `)`.
    closing = source.get_tokens((callback.end_byte, argument.end_byte))
    for token in closing:
      assert_token(token, ")", RULE_ID)
    tail = source.get_tokens((argument.end_byte, call.end_byte))
    for token in tail[:-1]:
      assert_token(token, ",", RULE_ID)
    closing += [assert_token(tail[-1] if tail else None, ")", RULE_ID)]
    if guarded and not source.comments_between(callback.end_byte, call.end_byte):
      # The guard's `}` takes the place of the closing tokens and their line breaks.
      yield fixer.remove_range((callback.end_byte, call.end_byte))
    else:
      for token in closing:
        yield fixer.remove(token)

    for return_statement in report.return_statements:
      yield from replace_return_statement(return_statement, fixer, source)

    if guarded:
      yield from self._indent_lines(fixer, body, callback.end_byte, unit)

    last_token = source.get_last_token(statement)
    if last_token is not None and last_token.value == ";" and (is_block or guarded):
      yield fixer.remove(last_token)

    if guarded:
      yield fixer.insert_text_after(call, f"\n{indent}}}")
    if braced:
      yield fixer.insert_text_after(call, " }")

    yield from self._fix_space_after(fixer, statement)

    # The patch spans the whole statement.
    yield fixer.insert_text_before(statement, "")
    yield fixer.insert_text_after(statement, "")

  def _base_indent(self, statement: Node, callback: Node) -> str:
    """
    Indentation the guard's braces line up with.

    A statement that shares its line with earlier code borrows the indent of the
    line its callback closes on, so the guard's `}` sits level with the loop's.
    """
    source = self.source_code
    line_start = source.line_start_of(statement.start_byte)
    if source.source_bytes[line_start : statement.start_byte].strip(b" \t"):
      return source.get_indent(callback.end_byte)
    return source.get_indent(statement.start_byte)

  def _indent_lines(self, fixer: RuleFixer, body: Node, end: int, unit: str) -> Iterator[EditOperation]:
    literals: List[Tuple[int, int]] = [
      (node.start_byte, node.end_byte) for node in descendants(body) if node.type in ("string", "template_string")
    ]
    for line_start in self.source_code.line_starts_between(body.start_byte, end):
      if any(start < line_start < stop for start, stop in literals):
        continue
      if is_blank_line(self.source_code, line_start):
        continue
      yield fixer.insert_text_before_range((line_start, line_start), unit)

  def _fix_space_before(self, fixer: RuleFixer, statement: Node) -> Iterator[EditOperation]:
    start = statement.start_byte
    if start > 0 and _WORD_CHARACTER.match(self.source_code.source_bytes[start - 1 : start]):
      yield fixer.insert_text_before(statement, " ")

  def _fix_space_after(self, fixer: RuleFixer, statement: Node) -> Iterator[EditOperation]:
    end = statement.end_byte
    if _WORD_CHARACTER.match(self.source_code.source_bytes[end : end + 1]):
      yield fixer.insert_text_after(statement, " ")
