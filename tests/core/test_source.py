"""
Tests for the tree-sitter backed Source Code Model.

Verifies:
1. Token stream construction (atomic strings, comments kept apart).
2. Token navigation helpers.
3. Byte offset to line/column conversion with multi-byte characters.
4. Strict parsing of invalid sources.
"""

import pytest

from foreach_fixer.core.errors import SourceParseError
from foreach_fixer.core.source import SourceCode, span_of
from foreach_fixer.enums import TokenType


def test_token_stream_values_and_types():
  source = SourceCode.parse("a.forEach(x => x);")

  assert [t.value for t in source.tokens] == ["a", ".", "forEach", "(", "x", "=>", "x", ")", ";"]
  assert source.tokens[0].type is TokenType.IDENTIFIER
  assert source.tokens[1].type is TokenType.PUNCTUATOR
  assert source.tokens[2].type is TokenType.IDENTIFIER
  assert source.tokens[5].type is TokenType.PUNCTUATOR


def test_strings_are_single_tokens():
  source = SourceCode.parse('const s = "a b";')

  values = [t.value for t in source.tokens]
  assert values == ["const", "s", "=", '"a b"', ";"]
  assert source.tokens[0].type is TokenType.KEYWORD
  assert source.tokens[3].type is TokenType.STRING


def test_comments_are_not_tokens():
  source = SourceCode.parse("// note\nfoo();")

  assert [t.value for t in source.tokens] == ["foo", "(", ")", ";"]
  assert len(source.comments) == 1
  assert source.get_text(source.comments[0]) == "// note"


def test_literal_token_types():
  source = SourceCode.parse("f(1, null, true, this);")
  types = {t.value: t.type for t in source.tokens}

  assert types["1"] is TokenType.NUMERIC
  assert types["null"] is TokenType.NULL
  assert types["true"] is TokenType.BOOLEAN
  assert types["this"] is TokenType.KEYWORD


def test_first_and_last_tokens(find_node):
  source = SourceCode.parse("foo(a, b);")
  statement = find_node(source.ast, "expression_statement")

  assert source.get_first_token(statement).value == "foo"
  assert source.get_last_token(statement).value == ";"
  assert source.get_last_token(statement, skip=1).value == ")"
  assert [t.value for t in source.get_last_tokens(statement, 2)] == [")", ";"]


def test_token_before_and_after():
  source = SourceCode.parse("a.forEach(x => x);")
  paren = source.tokens[3]

  assert source.get_token_before(paren).value == "forEach"
  assert source.get_token_after(paren).value == "x"
  assert source.get_token_after(source.tokens[0]).value == "."


def test_token_before_with_predicate():
  source = SourceCode.parse("a.forEach(x => x);")
  semicolon = source.tokens[-1]

  found = source.get_token_before(semicolon, lambda t: t.value == "(")
  assert found is not None
  assert found.start == source.tokens[3].start


def test_token_before_start_of_file_is_none():
  source = SourceCode.parse("foo();")
  assert source.get_token_before(source.tokens[0]) is None
  assert source.get_token_after(source.tokens[-1]) is None


def test_location_counts_characters_not_bytes():
  source = SourceCode.parse('const s = "é";\nfoo();')
  semicolon = source.tokens[4]
  foo = source.tokens[5]

  assert semicolon.value == ";"
  assert source.get_location(semicolon.start) == (1, 14)
  assert source.get_location(foo.start) == (2, 1)


def test_get_text_uses_byte_offsets():
  source = SourceCode.parse('const s = "é"; bar();')
  bar = [t for t in source.tokens if t.value == "bar"][0]

  assert source.get_text(bar) == "bar"
  assert source.get_text(span_of(bar)) == "bar"
  assert source.get_text() == 'const s = "é"; bar();'


def test_indentation_and_line_starts(find_node):
  code = "function f() {\n    foo();\n\n}"
  source = SourceCode.parse(code)
  call = find_node(source.ast, "call_expression")

  assert source.get_indent(call.start_byte) == "    "
  assert source.get_indent(0) == ""
  starts = source.line_starts_between(0, len(code.encode()))
  assert [source.get_location(offset)[0] for offset in starts] == [2, 3, 4]


def test_strict_parse_rejects_syntax_errors():
  with pytest.raises(SourceParseError) as excinfo:
    SourceCode.parse("foo(;")

  assert excinfo.value.line == 1
  assert "Syntax error" in str(excinfo.value)


def test_lenient_parse_keeps_partial_tree():
  source = SourceCode.parse("foo(;", strict=False)
  assert source.has_errors
