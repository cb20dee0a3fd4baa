"""
Static analysis over parsed JavaScript: lexical scopes and function usage checks.
"""

from foreach_fixer.analysis.function_usage import has_hoisted_declarations, is_function_self_used_inside
from foreach_fixer.analysis.scopes import (
  Definition,
  Reference,
  Scope,
  ScopeManager,
  Variable,
  binding_identifiers,
  is_same_or_ancestor,
)

__all__ = [
  "Definition",
  "Reference",
  "Scope",
  "ScopeManager",
  "Variable",
  "binding_identifiers",
  "has_hoisted_declarations",
  "is_function_self_used_inside",
  "is_same_or_ancestor",
]
