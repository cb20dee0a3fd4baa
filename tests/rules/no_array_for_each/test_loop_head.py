"""
Tests for loop head synthesis.
"""

import pytest

from foreach_fixer.core.nodes import call_arguments, unwrap_parentheses
from foreach_fixer.core.source import SourceCode
from foreach_fixer.rules.no_array_for_each.loop_head import (
  get_for_of_loop_head_range,
  get_for_of_loop_head_text,
  get_receiver_text,
)


def _call_parts(code: str, find_node):
  source = SourceCode.parse(code)
  call = find_node(source.ast, "call_expression")
  receiver = call.child_by_field_name("function").child_by_field_name("object")
  callback = unwrap_parentheses(call_arguments(call)[0])
  return source, call, receiver, callback


@pytest.mark.parametrize(
  "code, reassigned, expected",
  [
    ("list.forEach(x => x);", False, "for (const x of list) "),
    ("list.forEach(x => x);", True, "for (let x of list) "),
    ("list.forEach((x, i) => x);", False, "for (const [i, x] of list.entries()) "),
    ("list.forEach(([a, b], i) => a);", False, "for (const [i, [a, b]] of list.entries()) "),
    ("list.forEach(function ({a}) {});", False, "for (const {a} of list) "),
    ("a.b.forEach(x => x);", False, "for (const x of a.b) "),
    ("((a)).forEach(x => x);", False, "for (const x of (a)) "),
    ("(a, b).forEach(x => x);", False, "for (const x of (a, b)) "),
  ],
)
def test_head_text(find_node, code, reassigned, expected):
  source, _, receiver, callback = _call_parts(code, find_node)
  assert get_for_of_loop_head_text(callback, receiver, reassigned, source) == expected


def test_receiver_text_without_parentheses(find_node):
  source, _, receiver, _ = _call_parts("foo.bar().forEach(x => x);", find_node)
  assert get_receiver_text(receiver, source) == "foo.bar()"


def test_head_range_ends_at_body(find_node):
  code = "list.forEach((x) => { use(x); });"
  source, call, _, callback = _call_parts(code, find_node)

  start, end = get_for_of_loop_head_range(call, callback)

  assert start == 0
  assert source.get_text((start, end)) == "list.forEach((x) => "
