"""
Tests for the LintEngine orchestration.

Verifies:
1. Parse errors surface as failed results.
2. Fix passes repeat until nested call sites are all rewritten.
3. Verification keeps the last valid text.
4. Internal rule errors drop the fix but keep the diagnostic.
5. Custom rules plug in through the registry.
"""

from typing import Dict
from unittest.mock import patch

from foreach_fixer.config import RuntimeConfig
from foreach_fixer.core.engine import LintEngine
from foreach_fixer.core.errors import InternalRuleError
from foreach_fixer.core.fixer import Patch
from foreach_fixer.core.tracer import TraceEventType
from foreach_fixer.rules.base import Rule, available_rules, register_rule
from foreach_fixer.rules.no_array_for_each.composer import ForOfFixComposer

NESTED = "a.forEach(x => {\n  x.forEach(y => use(y));\n});"


def test_parse_error_result():
  result = LintEngine().lint("list.forEach(x => {")
  assert not result.success
  assert result.errors[0].startswith("Parse Error:")

  fixed = LintEngine().fix("list.forEach(x => {")
  assert not fixed.success
  assert fixed.code == "list.forEach(x => {"


def test_nested_calls_need_two_passes():
  result = LintEngine().fix(NESTED)

  assert result.success
  assert result.code == "for (const x of a) {\n  for (const y of x) use(y);\n}"
  assert result.passes == 2
  assert result.fixed_count == 2
  assert result.changed
  assert result.diagnostics == []


def test_nested_calls_report_deferred_patch_in_trace():
  result = LintEngine().fix(NESTED)
  kinds = [event["type"] for event in result.trace_events]
  assert TraceEventType.PATCH_DEFERRED in kinds
  assert kinds.count(TraceEventType.PATCH_APPLIED) == 2


def test_max_passes_limits_rewriting():
  engine = LintEngine(config=RuntimeConfig(max_passes=1))
  result = engine.fix(NESTED)

  assert result.passes == 1
  assert result.code == "for (const x of a) {\n  x.forEach(y => use(y));\n}"
  assert len(result.diagnostics) == 1


def test_no_fixable_reports_leaves_code_untouched():
  code = "list.forEach(async x => { await use(x); });"
  result = LintEngine().fix(code)

  assert result.success
  assert not result.changed
  assert result.passes == 0
  assert len(result.diagnostics) == 1


def test_verification_failure_keeps_previous_text():
  code = "list.forEach(x => use(x));"
  broken = ("for (const x of list use(x);", [], [])

  with patch("foreach_fixer.core.engine.apply_patches", return_value=broken):
    result = LintEngine().fix(code)

  assert not result.success
  assert result.code == code
  assert result.passes == 0
  assert "unparsable" in result.errors[0]


def test_verification_can_be_disabled():
  code = "list.forEach(x => use(x));"
  broken = ("for (const x of list use(x);", [], [])

  with patch("foreach_fixer.core.engine.apply_patches", return_value=broken):
    result = LintEngine(config=RuntimeConfig(verify_output=False, max_passes=1)).fix(code)

  assert result.code == "for (const x of list use(x);"


def test_internal_error_drops_fix_only():
  with patch.object(ForOfFixComposer, "_edits", side_effect=InternalRuleError("boom")):
    result = LintEngine().lint("list.forEach(x => use(x));")

  assert not result.success
  assert result.errors == ["boom"]
  assert len(result.diagnostics) == 1
  assert not result.diagnostics[0].fixable


def test_custom_rule_registration():
  @register_rule
  class NoDebuggerRule(Rule):
    rule_id = "no-debugger"
    messages = {"unexpected": "Unexpected 'debugger' statement."}
    fixable = True

    def listeners(self) -> Dict:
      return {"debugger_statement": self._on_debugger}

    def _on_debugger(self, node):
      self.context.report(node, "unexpected", lambda fixer: [fixer.remove(node)])

  assert "no-debugger" in available_rules()

  result = LintEngine().fix("debugger;\nlist.forEach(x => use(x));")
  assert result.code == "\nfor (const x of list) use(x);"
  assert result.fixed_count == 2


def test_diagnostics_sorted_by_position():
  code = "b.forEach(x => x);\na.forEach(y => y);"
  result = LintEngine().lint(code)
  assert [(d.line, d.column) for d in result.diagnostics] == [(1, 3), (2, 3)]


def test_patch_type_on_fixable_diagnostic():
  result = LintEngine().lint("list.forEach(x => use(x));")
  assert isinstance(result.diagnostics[0].fix, Patch)
  assert result.diagnostics[0].fix.range == (0, 26)
