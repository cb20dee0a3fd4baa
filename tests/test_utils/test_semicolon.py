"""
Tests for the automatic semicolon insertion helper.
"""

import pytest

from foreach_fixer.core.source import SourceCode
from foreach_fixer.utils.semicolon import needs_semicolon


def _last_token(code: str):
  source = SourceCode.parse(code)
  return source.tokens[-1]


def test_code_not_starting_with_continuation_character():
  assert not needs_semicolon(_last_token("foo()"), "bar")
  assert not needs_semicolon(_last_token("foo()"), "")


def test_no_previous_token():
  assert not needs_semicolon(None, "[a]")


@pytest.mark.parametrize(
  "code, expected",
  [
    ("foo()", True),
    ("foo", True),
    ("'a'", True),
    ("1", True),
    ("a[0]", True),
    ("x = {}", True),
    ("foo;", False),
    ("{}", False),
    ("if (a) {}", False),
    ("function f() {}", False),
    ("x = function () {}", True),
    ("x = () => {}", True),
    ("a++", True),
    ("this", True),
  ],
)
def test_previous_statement_continues(code, expected):
  assert needs_semicolon(_last_token(code), "[x]") is expected


def test_statement_head_parenthesis_does_not_continue():
  source = SourceCode.parse("if (a) [x].map(f)")
  paren = source.get_token_before(source.tokens[4])
  assert paren.value == ")"
  assert not needs_semicolon(paren, "[")

  source = SourceCode.parse("while (a) [x].map(f)")
  paren = [t for t in source.tokens if t.value == ")"][0]
  assert not needs_semicolon(paren, "(")
