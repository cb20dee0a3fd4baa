"""
Node Kind Tables.

The finite sets of tree-sitter-javascript node kinds that the analysis and the
rules dispatch on.
"""

from typing import FrozenSet

COMMENT_KINDS: FrozenSet[str] = frozenset({"comment", "html_comment", "hash_bang_line"})

# Every node that introduces a function scope.
FUNCTION_KINDS: FrozenSet[str] = frozenset(
  {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",  # pre-0.21 grammars name function expressions `function`
    "generator_function",
    "arrow_function",
    "method_definition",
  }
)

# Function values whose optional name is bound in its own scope.
FUNCTION_EXPRESSION_KINDS: FrozenSet[str] = frozenset({"function_expression", "function", "generator_function"})

# Function values accepted as a rewritable callback.
CALLBACK_KINDS: FrozenSet[str] = frozenset({"function_expression", "function", "arrow_function"})

CLASS_KINDS: FrozenSet[str] = frozenset({"class", "class_declaration"})

# Constructs with their own `continue` target.
LOOP_KINDS: FrozenSet[str] = frozenset(
  {
    "while_statement",
    "do_statement",
    "for_statement",
    "for_in_statement",  # covers both for-in and for-of
  }
)

# Identifier-like leaves that may denote a variable reference.
REFERENCE_IDENTIFIER_KINDS: FrozenSet[str] = frozenset(
  {
    "identifier",
    "shorthand_property_identifier",
    "shorthand_property_identifier_pattern",
  }
)

# Destructuring wrappers an assignment target can be nested in.
PATTERN_KINDS: FrozenSet[str] = frozenset(
  {
    "array_pattern",
    "object_pattern",
    "pair_pattern",
    "assignment_pattern",
    "object_assignment_pattern",
    "rest_pattern",
    "parenthesized_expression",
  }
)

# Parameters that can be moved verbatim into a `for (const <binding> of …)` head.
PLAIN_PARAMETER_KINDS: FrozenSet[str] = frozenset({"identifier", "object_pattern", "array_pattern"})

# Parents that hold a statement as one entry of a statement list.
STATEMENT_LIST_KINDS: FrozenSet[str] = frozenset({"program", "statement_block", "switch_case", "switch_default"})
