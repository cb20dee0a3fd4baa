"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- `lint_code` / `fix_code` helpers running the engine on JavaScript snippets.
- Global rule registry isolation to prevent tests with custom rules from leaking.
- Tracer reset so trace assertions only see the current test's events.
"""

import sys
from pathlib import Path
from typing import Callable, List

import pytest
from tree_sitter import Node

# Add src to path so we can import 'foreach_fixer' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

import foreach_fixer.rules  # noqa: E402  (registers the bundled rules)
from foreach_fixer.core.engine import LintEngine  # noqa: E402
from foreach_fixer.core.nodes import descendants  # noqa: E402
from foreach_fixer.core.results import Diagnostic  # noqa: E402
from foreach_fixer.core.tracer import reset_tracer  # noqa: E402
from foreach_fixer.rules.base import _RULE_REGISTRY  # noqa: E402


@pytest.fixture
def lint_code() -> Callable[[str], List[Diagnostic]]:
  """Returns a helper that lints a snippet and asserts the run was clean."""

  def _lint(code: str) -> List[Diagnostic]:
    result = LintEngine().lint(code)
    assert result.success, result.errors
    return result.diagnostics

  return _lint


@pytest.fixture
def fix_code() -> Callable[[str], str]:
  """Returns a helper that fixes a snippet and asserts the run was clean."""

  def _fix(code: str) -> str:
    result = LintEngine().fix(code)
    assert result.success, result.errors
    return result.code

  return _fix


@pytest.fixture
def find_node() -> Callable[..., Node]:
  """Returns a helper fetching the n-th descendant of a given kind."""

  def _find(root: Node, kind: str, nth: int = 0) -> Node:
    matches = [node for node in descendants(root) if node.type == kind]
    assert len(matches) > nth, f"no {kind} #{nth} in tree"
    return matches[nth]

  return _find


@pytest.fixture(autouse=True)
def isolate_rule_registry():
  """
  Ensures that rules registered by a test do not leak into other tests.
  """
  original_registry = _RULE_REGISTRY.copy()
  yield
  _RULE_REGISTRY.clear()
  _RULE_REGISTRY.update(original_registry)


@pytest.fixture(autouse=True)
def fresh_tracer():
  reset_tracer()
  yield
  reset_tracer()
