"""
Tests for fixability analysis.

Rejection reasons are observed through the inspection events the rule writes
to the tracer, so each case runs the real traversal.
"""

import pytest

from foreach_fixer.analysis.scopes import ScopeManager
from foreach_fixer.core.engine import LintEngine
from foreach_fixer.core.errors import InternalRuleError
from foreach_fixer.core.source import SourceCode
from foreach_fixer.core.tracer import TraceEventType, get_tracer
from foreach_fixer.rules.no_array_for_each.fixability import (
  FixabilityAnalyzer,
  FixabilityReport,
  contains_optional_chain,
  is_static_reference,
)
from foreach_fixer.rules.no_array_for_each.matcher import CallSiteMatcher


def _inspections(code: str):
  result = LintEngine().lint(code)
  assert result.success, result.errors
  return [event["metadata"] for event in get_tracer().export() if event["type"] == TraceEventType.INSPECTION]


def _expression(code: str, find_node):
  source = SourceCode.parse(code)
  return find_node(source.ast, "expression_statement").named_children[0]


@pytest.mark.parametrize(
  "code, reason",
  [
    ("list.forEach?.(x => x);", "null-safe (`?.()`)"),
    ("(list.forEach(x => x));", "parenthesized"),
    ("list.forEach(x => x, self);", "exactly one argument"),
    ("list.forEach();", "exactly one argument"),
    ("f(list.forEach(x => x));", "standalone statement"),
    ("list.forEach(callback);", "inline function"),
    ("list.forEach(async x => x);", "async or a generator"),
    ("list.forEach((x = 0) => x);", "loop binding"),
    ("getList()?.forEach(x => x);", "evaluated twice"),
    ("a?.b.forEach(x => x);", "short-circuits"),
    ("x.forEach(x => x);", "capture a name"),
    ("list.forEach(x => { while (x) return; });", "nested inside a loop"),
    ("list.forEach(function (x) { this.add(x); });", "own name"),
    ("list.forEach(x => { var y = x; });", "hoisted"),
  ],
)
def test_rejection_reasons(code, reason):
  inspections = _inspections(code)
  assert len(inspections) == 1
  assert inspections[0]["outcome"] == "reported"
  assert reason in inspections[0]["detail"]


def test_fixable_outcome():
  inspections = _inspections("list.forEach(x => x);")
  assert inspections == [{"outcome": "fixable", "detail": ""}]


@pytest.mark.parametrize(
  "code",
  [
    "function f(x) { x.forEach(y => y); }",
    "const x = []; x.forEach(y => use(y));",
    "items.filter(x => x).forEach(x => use(x));",
  ],
)
def test_capture_allows_unrelated_or_inner_names(code):
  assert _inspections(code)[0]["outcome"] == "fixable"


@pytest.mark.parametrize(
  "code",
  [
    "const x = [[1]]; function f() { x.forEach(x => use(x)); }",
    "function f(x) { x[0].forEach(x => use(x)); }",
    "list[i].forEach((x, i) => use(x));",
    "list.forEach(list => use(list));",
  ],
)
def test_capture_rejects_shadowed_receiver_names(code):
  assert "capture" in _inspections(code)[0]["detail"]


@pytest.mark.parametrize(
  "code, expected",
  [
    ("a;", True),
    ("this;", True),
    ("a.b.c;", True),
    ("a?.b;", True),
    ("a['b'][0];", True),
    ("(a).b;", True),
    ("a[b];", False),
    ("a();", False),
    ("a.b();", False),
    ("new A();", False),
  ],
)
def test_is_static_reference(find_node, code, expected):
  assert is_static_reference(_expression(code, find_node)) is expected


@pytest.mark.parametrize(
  "code, expected",
  [
    ("a?.b;", True),
    ("a?.b.c;", True),
    ("a?.();", True),
    ("a.b[0].c();", False),
    ("(a?.b).c;", False),
  ],
)
def test_contains_optional_chain(find_node, code, expected):
  assert contains_optional_chain(_expression(code, find_node)) is expected


def test_reject_helper():
  report = FixabilityReport.reject("nope")
  assert not report.fixable
  assert report.reason == "nope"
  assert report.callback is None


def test_reassignment_flag_ignores_other_bindings():
  result = LintEngine().fix("list.forEach((x, i) => { let y = x; y += i; use(y); });")
  assert result.code == "for (const [i, x] of list.entries()) { let y = x; y += i; use(y); }"


def test_missing_function_info_is_internal_error(find_node):
  source = SourceCode.parse("list.forEach(x => x);")
  manager = ScopeManager(source)
  call_site = CallSiteMatcher(source, manager).match(find_node(source.ast, "call_expression"))
  analyzer = FixabilityAnalyzer(source, manager, {}, [])

  with pytest.raises(InternalRuleError, match="not visited"):
    analyzer.analyze(call_site)
