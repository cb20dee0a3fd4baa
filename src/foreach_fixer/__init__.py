"""
foreach-fixer Package.

A lint rule and autofixer for JavaScript that replaces statement-level
`Array#forEach(…)` calls with `for…of` loops whenever the rewrite is provably
behaviour preserving.

Usage
-----

Simple String Fixing
^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import foreach_fixer
    code = "list.forEach(x => { console.log(x); });"
    print(foreach_fixer.fix(code))
    # for (const x of list) { console.log(x); }

Advanced Usage (Lint Engine)
^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from foreach_fixer import LintEngine, RuntimeConfig

    engine = LintEngine(config=RuntimeConfig(max_passes=3))
    res = engine.fix(code)

    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from typing import List

from foreach_fixer.config import RuntimeConfig
from foreach_fixer.core.engine import LintEngine
from foreach_fixer.core.results import Diagnostic, FixResult, LintResult

__version__ = "0.1.0"


def lint(code: str) -> List[Diagnostic]:
  """
  Reports every statement-level `forEach` call in a string of JavaScript.

  Args:
      code (str): The source code to check.

  Returns:
      List[Diagnostic]: One diagnostic per call site; `fix` is set where a safe
      rewrite exists.

  Raises:
      ValueError: If the source cannot be analysed (e.g. syntax errors).
  """
  result = LintEngine().lint(code)
  if not result.success:
    raise ValueError("Lint failed:\n" + "\n".join(result.errors))
  return result.diagnostics


def fix(code: str) -> str:
  """
  Rewrites every safely fixable `forEach` statement into a `for…of` loop.

  Args:
      code (str): The source code to fix.

  Returns:
      str: The rewritten source code.

  Raises:
      ValueError: If the source cannot be parsed or a fix pass failed.
  """
  result = LintEngine().fix(code)
  if not result.success:
    raise ValueError("Fix failed:\n" + "\n".join(result.errors))
  return result.code


__all__ = [
  "Diagnostic",
  "FixResult",
  "LintEngine",
  "LintResult",
  "RuntimeConfig",
  "fix",
  "lint",
  "__version__",
]
