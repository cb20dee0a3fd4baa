"""
Source Code Model.

Wraps a tree-sitter parse of a JavaScript file together with a flat token
stream, giving rules the navigation primitives they need:

- text of any node, token or byte range,
- first/last tokens of a node and the tokens around it,
- line/column locations and the indentation of a line.

All offsets are UTF-8 byte offsets, matching tree-sitter's node ranges.
"""

import bisect
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

from foreach_fixer.core.errors import SourceParseError
from foreach_fixer.core.kinds import COMMENT_KINDS
from foreach_fixer.enums import TokenType

JS_LANGUAGE = Language(tree_sitter_javascript.language())

# Named nodes that are emitted as a single token even though they have children.
ATOMIC_KINDS = frozenset({"string", "regex"})

_NAMED_TOKEN_TYPES = {
  "number": TokenType.NUMERIC,
  "string": TokenType.STRING,
  "regex": TokenType.REGULAR_EXPRESSION,
  "this": TokenType.KEYWORD,
  "super": TokenType.KEYWORD,
  "null": TokenType.NULL,
  "true": TokenType.BOOLEAN,
  "false": TokenType.BOOLEAN,
  "string_fragment": TokenType.TEMPLATE,
  "escape_sequence": TokenType.TEMPLATE,
  "jsx_text": TokenType.JSX_TEXT,
  "optional_chain": TokenType.PUNCTUATOR,
  "empty_statement": TokenType.PUNCTUATOR,
}

_WORD = re.compile(r"^[A-Za-z_$][\w$]*$")

Span = Tuple[int, int]


@dataclass(frozen=True)
class Token:
  """
  A single lexical token.

  Attributes:
      type: Lexical category.
      value: Source text of the token.
      start: Start byte offset (inclusive).
      end: End byte offset (exclusive).
      node: The tree-sitter leaf the token was read from.
  """

  type: TokenType
  value: str
  start: int
  end: int
  node: Node = field(compare=False, repr=False)

  @property
  def range(self) -> Span:
    return self.start, self.end


Locatable = Union[Node, Token, Span]


def span_of(target: Locatable) -> Span:
  """
  Normalizes a node, token or explicit range into a `(start, end)` byte pair.
  """
  if isinstance(target, Token):
    return target.start, target.end
  if isinstance(target, tuple):
    return target
  return target.start_byte, target.end_byte


def _classify(node: Node, value: str) -> TokenType:
  if node.type in _NAMED_TOKEN_TYPES and node.is_named:
    return _NAMED_TOKEN_TYPES[node.type]
  if node.is_named:
    return TokenType.IDENTIFIER if _WORD.match(value) else TokenType.PUNCTUATOR
  return TokenType.KEYWORD if _WORD.match(value) else TokenType.PUNCTUATOR


def _find_first_error(root: Node) -> Optional[Node]:
  stack = [root]
  while stack:
    node = stack.pop()
    if node.type == "ERROR" or node.is_missing:
      return node
    stack.extend(reversed([child for child in node.children if child.has_error or child.is_missing]))
  return None


class SourceCode:
  """
  A parsed JavaScript file.

  Attributes:
      text (str): The original source text.
      source_bytes (bytes): UTF-8 encoding of `text`; node offsets index into it.
      tree (Tree): The tree-sitter parse tree.
      ast (Node): The `program` root node.
      tokens (List[Token]): Non-comment tokens in document order.
      comments (List[Node]): Comment nodes in document order.
  """

  def __init__(self, text: str, tree: Tree):
    self.text = text
    self.source_bytes = text.encode("utf-8")
    self.tree = tree
    self.ast = tree.root_node
    self.tokens: List[Token] = []
    self.comments: List[Node] = []
    self._collect_tokens()
    self._token_starts = [token.start for token in self.tokens]
    self._token_ends = [token.end for token in self.tokens]
    self._line_starts = [0] + [match.end() for match in re.finditer(rb"\r\n|\r|\n", self.source_bytes)]

  @classmethod
  def parse(cls, text: str, strict: bool = True) -> "SourceCode":
    """
    Parses JavaScript source text.

    Args:
        text: The source code.
        strict: If True, any syntax error raises instead of yielding a partial tree.

    Returns:
        SourceCode: The parsed file.

    Raises:
        SourceParseError: If `strict` and the tree contains error or missing nodes.
    """
    parser = Parser(JS_LANGUAGE)
    tree = parser.parse(text.encode("utf-8"))
    source = cls(text, tree)
    if strict and tree.root_node.has_error:
      error = _find_first_error(tree.root_node) or tree.root_node
      line, column = source.get_location(error.start_byte)
      raise SourceParseError(f"Syntax error at line {line}, column {column}", line=line, column=column)
    return source

  @property
  def has_errors(self) -> bool:
    return self.ast.has_error

  def _collect_tokens(self) -> None:
    stack = [self.ast]
    while stack:
      node = stack.pop()
      if node.type in COMMENT_KINDS:
        self.comments.append(node)
        continue
      if node.child_count == 0 or (node.is_named and node.type in ATOMIC_KINDS):
        if node.end_byte > node.start_byte:
          value = self.get_text(node)
          self.tokens.append(Token(_classify(node, value), value, node.start_byte, node.end_byte, node))
        continue
      stack.extend(reversed(node.children))

  # --- Text ---

  def get_text(self, target: Optional[Locatable] = None) -> str:
    """
    Returns the source text of a node, token or byte range.

    Args:
        target: What to slice. None returns the whole file.
    """
    if target is None:
      return self.text
    start, end = span_of(target)
    return self.source_bytes[start:end].decode("utf-8")

  def get_location(self, offset: int) -> Tuple[int, int]:
    """
    Converts a byte offset to a 1-based `(line, column)` pair.

    Columns count characters, not bytes.
    """
    index = bisect.bisect_right(self._line_starts, offset) - 1
    line_start = self._line_starts[index]
    column = len(self.source_bytes[line_start:offset].decode("utf-8", errors="replace"))
    return index + 1, column + 1

  def line_start_of(self, offset: int) -> int:
    """Byte offset of the first character on the line containing `offset`."""
    return self._line_starts[bisect.bisect_right(self._line_starts, offset) - 1]

  def line_starts_between(self, start: int, end: int) -> List[int]:
    """Offsets of the line beginnings strictly inside `(start, end)`."""
    low = bisect.bisect_right(self._line_starts, start)
    high = bisect.bisect_left(self._line_starts, end)
    return self._line_starts[low:high]

  def get_indent(self, offset: int) -> str:
    """
    Returns the leading whitespace of the line containing `offset`.
    """
    line_start = self.line_start_of(offset)
    cursor = line_start
    while cursor < len(self.source_bytes) and self.source_bytes[cursor : cursor + 1] in (b" ", b"\t"):
      cursor += 1
    return self.source_bytes[line_start:cursor].decode("utf-8")

  # --- Tokens ---

  def get_tokens(self, target: Locatable) -> List[Token]:
    """All tokens fully contained in the node, token or range."""
    start, end = span_of(target)
    low = bisect.bisect_left(self._token_starts, start)
    high = bisect.bisect_right(self._token_ends, end)
    return self.tokens[low:high]

  def get_first_token(self, target: Locatable, skip: int = 0) -> Optional[Token]:
    tokens = self.get_tokens(target)
    return tokens[skip] if len(tokens) > skip else None

  def get_last_token(self, target: Locatable, skip: int = 0) -> Optional[Token]:
    tokens = self.get_tokens(target)
    return tokens[-1 - skip] if len(tokens) > skip else None

  def get_last_tokens(self, target: Locatable, count: int) -> List[Token]:
    tokens = self.get_tokens(target)
    return tokens[-count:] if count else []

  def get_token_before(
    self,
    target: Union[Locatable, int],
    predicate: Optional[Callable[[Token], bool]] = None,
  ) -> Optional[Token]:
    """
    Finds the closest token ending at or before the start of `target`.

    Args:
        target: Node, token, range or plain byte offset.
        predicate: Optional filter; tokens failing it are skipped.
    """
    start = target if isinstance(target, int) else span_of(target)[0]
    index = bisect.bisect_right(self._token_ends, start) - 1
    while index >= 0:
      token = self.tokens[index]
      if predicate is None or predicate(token):
        return token
      index -= 1
    return None

  def get_token_after(
    self,
    target: Union[Locatable, int],
    predicate: Optional[Callable[[Token], bool]] = None,
  ) -> Optional[Token]:
    """
    Finds the closest token starting at or after the end of `target`.
    """
    end = target if isinstance(target, int) else span_of(target)[1]
    index = bisect.bisect_left(self._token_starts, end)
    while index < len(self.tokens):
      token = self.tokens[index]
      if predicate is None or predicate(token):
        return token
      index += 1
    return None

  def comments_between(self, start: int, end: int) -> List[Node]:
    return [comment for comment in self.comments if comment.start_byte >= start and comment.end_byte <= end]
