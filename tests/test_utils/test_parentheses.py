"""
Tests for expression statement parenthesization.
"""

import pytest

from foreach_fixer.core.nodes import named_children
from foreach_fixer.core.source import SourceCode
from foreach_fixer.utils.parentheses import should_add_parentheses_to_expression_statement_expression


def _assigned_value(code: str):
  """Parses `x = <expr>;` and returns (source, expr)."""
  source = SourceCode.parse(code)
  statement = named_children(source.ast)[0]
  assignment = named_children(statement)[0]
  return source, assignment.child_by_field_name("right")


@pytest.mark.parametrize(
  "code, expected",
  [
    ("x = {a: 1};", True),
    ("x = function () {};", True),
    ("x = class {};", True),
    ("x = async function () {};", True),
    ("x = foo();", False),
    ("x = [1];", False),
    ("x = (1, 2);", False),
  ],
)
def test_wrapping_decisions(code, expected):
  source, expression = _assigned_value(code)
  assert should_add_parentheses_to_expression_statement_expression(expression, source) is expected
