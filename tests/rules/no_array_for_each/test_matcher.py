"""
Tests for call site matching.
"""

import pytest

from foreach_fixer.analysis.scopes import ScopeManager
from foreach_fixer.core.source import SourceCode
from foreach_fixer.rules.no_array_for_each.matcher import (
  CallSiteMatcher,
  is_method_call,
  is_node_matches,
  static_member_path,
)


def _parse(code: str):
  source = SourceCode.parse(code)
  return source, ScopeManager(source)


@pytest.mark.parametrize(
  "code, expected",
  [
    ("a;", "a"),
    ("a.b.c;", "a.b.c"),
    ("(a.b).c;", "a.b.c"),
    ("a?.b;", None),
    ("a[b];", None),
    ("a().b;", None),
    ("this.a;", None),
  ],
)
def test_static_member_path(find_node, code, expected):
  source, _ = _parse(code)
  expression = find_node(source.ast, "expression_statement").named_children[0]
  assert static_member_path(expression, source) == expected


def test_is_node_matches(find_node):
  source, _ = _parse("React.Children;")
  expression = find_node(source.ast, "member_expression")
  assert is_node_matches(expression, ["React.Children"], source)
  assert not is_node_matches(expression, ["Children"], source)


@pytest.mark.parametrize(
  "code, expected",
  [
    ("a.forEach(f);", True),
    ("a?.forEach(f);", True),
    ("a.forEach?.(f);", True),
    ("a.forEach();", True),
    ("a['forEach'](f);", False),
    ("a.forEach`t`;", False),
    ("forEach(f);", False),
    ("a.each(f);", False),
    ("a.#forEach(f);", False),
  ],
)
def test_is_method_call(find_node, code, expected):
  if "#" in code:
    code = f"class A {{ #forEach() {{}} m(a) {{ {code} }} }}"
  source, _ = _parse(code)
  call = find_node(source.ast, "call_expression")
  assert is_method_call(call, "forEach", source) is expected


def test_matcher_records_scope(find_node):
  source, manager = _parse("function f(list) { list.forEach(g); }")
  call = find_node(source.ast, "call_expression")
  function = find_node(source.ast, "function_declaration")

  call_site = CallSiteMatcher(source, manager).match(call)

  assert call_site is not None
  assert call_site.scope is manager.acquire(function)
  assert source.get_text(call_site.receiver) == "list"
  assert source.get_text(call_site.method) == "forEach"
  assert source.get_text(call_site.callee) == "list.forEach"


@pytest.mark.parametrize(
  "code",
  [
    "React.Children.forEach(c, f);",
    "Children.forEach(c, f);",
    "R.forEach(f, list);",
    "pIteration.forEach(list, f);",
    "(R).forEach(f, list);",
  ],
)
def test_matcher_ignores_allowlisted_receivers(find_node, code):
  source, manager = _parse(code)
  call = find_node(source.ast, "call_expression")
  assert CallSiteMatcher(source, manager).match(call) is None


def test_matcher_keeps_lookalike_receivers(find_node):
  source, manager = _parse("foo.React.Children.forEach(f);")
  call = find_node(source.ast, "call_expression")
  assert CallSiteMatcher(source, manager).match(call) is not None
