"""
Enumerations for foreach-fixer.

This module defines the small closed vocabularies shared by the source model,
the scope analysis and the rule implementation.
"""

from enum import Enum


class TokenType(str, Enum):
  """
  Lexical category of a token in the JavaScript token stream.

  Mirrors the token categories used by ESTree tooling so that rule helpers
  (e.g. semicolon insertion checks) can reason about them directly.
  """

  PUNCTUATOR = "Punctuator"
  KEYWORD = "Keyword"
  IDENTIFIER = "Identifier"
  STRING = "String"
  NUMERIC = "Numeric"
  TEMPLATE = "Template"
  REGULAR_EXPRESSION = "RegularExpression"
  BOOLEAN = "Boolean"
  NULL = "Null"
  JSX_TEXT = "JSXText"


class ScopeType(str, Enum):
  """
  Kind of lexical scope created by the scope analyser.
  """

  GLOBAL = "global"
  FUNCTION = "function"
  FUNCTION_EXPRESSION_NAME = "function-expression-name"
  CLASS = "class"
  BLOCK = "block"
  FOR = "for"
  SWITCH = "switch"
  CATCH = "catch"


class DefinitionType(str, Enum):
  """
  How a variable was introduced into its scope.
  """

  PARAMETER = "Parameter"
  VARIABLE = "Variable"
  FUNCTION_NAME = "FunctionName"
  CLASS_NAME = "ClassName"
  CATCH_CLAUSE = "CatchClause"
  IMPORT_BINDING = "ImportBinding"
