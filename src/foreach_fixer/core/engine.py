"""
Lint and Fix Engine.

This module provides the `LintEngine`, the orchestrator that runs rules over
JavaScript source. It handles:
1.  **Parsing**: tree-sitter parse, rejecting sources with syntax errors.
2.  **Analysis**: one scope model per parse, shared by all rules.
3.  **Rule execution**: one traversal per rule, collecting diagnostics.
4.  **Fixing**: repeated lint + patch application until the source is stable,
    verifying that every pass still parses.
"""

import logging
from typing import List, Optional, Sequence, Tuple, Type

from foreach_fixer.analysis.scopes import ScopeManager
from foreach_fixer.config import RuntimeConfig
from foreach_fixer.core.context import RuleContext
from foreach_fixer.core.errors import FixVerificationError, InternalRuleError, SourceParseError
from foreach_fixer.core.fixer import apply_patches
from foreach_fixer.core.results import Diagnostic, FixResult, LintResult
from foreach_fixer.core.source import SourceCode
from foreach_fixer.core.tracer import get_tracer, reset_tracer
from foreach_fixer.core.traversal import Traverser
from foreach_fixer.rules import Rule, available_rules, get_rule

logger = logging.getLogger(__name__)


class LintEngine:
  """
  Runs rules over source text.

  Args:
      config: Runtime settings. Defaults to `RuntimeConfig()`.
      rules: Rule classes to run. Defaults to every registered rule.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None, rules: Optional[Sequence[Type[Rule]]] = None):
    self.config = config or RuntimeConfig()
    if rules is None:
      rules = [get_rule(rule_id) for rule_id in available_rules()]
    self.rules: List[Type[Rule]] = list(rules)

  def lint(self, code: str, filename: str = "<input>") -> LintResult:
    """
    Reports problems in `code` without changing it.

    Args:
        code: JavaScript source.
        filename: Name used in the result.

    Returns:
        LintResult: Diagnostics sorted by position. `success` is False if the
        source did not parse or a rule failed internally.
    """
    reset_tracer()
    return self._lint(code, filename)

  def fix(self, code: str, filename: str = "<input>") -> FixResult:
    """
    Applies all available fixes to `code`.

    Each pass lints the current text and applies every non-overlapping patch;
    overlapping patches are recomputed in the next pass. The loop ends when a
    pass has nothing to apply, when `config.max_passes` is reached, or when a
    pass output fails verification (the last valid text is kept).

    Args:
        code: JavaScript source.
        filename: Name used in the result.

    Returns:
        FixResult: The rewritten code, pass statistics, the diagnostics left in
        the rewritten code and the execution trace.
    """
    reset_tracer()
    tracer = get_tracer()
    tracer.start_phase("Fix", filename)

    current = code
    passes = 0
    fixed_count = 0
    errors: List[str] = []

    result = self._lint(current, filename)
    errors.extend(result.errors)
    if not result.success and not result.diagnostics:
      tracer.end_phase()
      return FixResult(
        filename=filename,
        code=code,
        errors=errors,
        success=False,
        trace_events=tracer.export(),
      )

    while passes < self.config.max_passes:
      patches = [diagnostic.fix for diagnostic in result.diagnostics if diagnostic.fix is not None]
      if not patches:
        break

      tracer.start_phase(f"Fix pass {passes + 1}", f"{len(patches)} candidate patch(es)")
      output, applied, deferred = apply_patches(current, patches)
      for patch in applied:
        tracer.log_patch(patch.range, patch.text, applied=True)
      for patch in deferred:
        tracer.log_patch(patch.range, patch.text, applied=False)
      logger.debug("Pass %d: applied %d, deferred %d", passes + 1, len(applied), len(deferred))

      if self.config.verify_output:
        try:
          SourceCode.parse(output)
        except SourceParseError as e:
          error = FixVerificationError(f"Fix pass {passes + 1} produced unparsable code: {e}")
          logger.error(str(error))
          tracer.log_warning(str(error))
          errors.append(str(error))
          tracer.end_phase()
          break

      current = output
      passes += 1
      fixed_count += len(applied)
      tracer.end_phase()

      result = self._lint(current, filename)
      errors.extend(result.errors)

    tracer.end_phase()
    errors = list(dict.fromkeys(errors))
    return FixResult(
      filename=filename,
      code=current,
      changed=current != code,
      passes=passes,
      fixed_count=fixed_count,
      diagnostics=result.diagnostics,
      errors=errors,
      success=not errors,
      trace_events=tracer.export(),
    )

  def _lint(self, code: str, filename: str) -> LintResult:
    tracer = get_tracer()
    tracer.start_phase("Lint", filename)
    try:
      source_code = SourceCode.parse(code)
    except SourceParseError as e:
      logger.debug("Cannot parse %s: %s", filename, e)
      tracer.end_phase()
      return LintResult(filename=filename, errors=[f"Parse Error: {e}"], success=False)

    diagnostics, errors = self._run_rules(source_code)
    tracer.end_phase()
    diagnostics.sort(key=lambda d: (d.line, d.column))
    return LintResult(filename=filename, diagnostics=diagnostics, errors=errors, success=not errors)

  def _run_rules(self, source_code: SourceCode) -> Tuple[List[Diagnostic], List[str]]:
    scope_manager = ScopeManager(source_code)
    diagnostics: List[Diagnostic] = []
    errors: List[str] = []
    for rule_cls in self.rules:
      context = RuleContext(rule_cls.rule_id, rule_cls.messages, source_code, scope_manager)
      rule = rule_cls(context)
      try:
        Traverser(rule.listeners()).traverse(source_code.ast)
      except InternalRuleError as e:
        logger.error("Rule %s aborted: %s", rule_cls.rule_id, e)
        errors.append(str(e))
      diagnostics.extend(context.diagnostics)
      errors.extend(context.errors)
    return diagnostics, errors
