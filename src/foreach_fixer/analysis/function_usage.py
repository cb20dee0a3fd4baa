"""
Function Body Usage Checks.

Predicates about what a function body relies on from its own function-ness.
A callback that uses `this`, `arguments`, `new.target` or its own name, or that
hoists `var`/function declarations to its own function scope, cannot be inlined
as a loop body without changing meaning.
"""

from tree_sitter import Node

from foreach_fixer.analysis.scopes import Scope
from foreach_fixer.core.errors import InternalRuleError
from foreach_fixer.enums import DefinitionType, ScopeType


def is_function_self_used_inside(function_node: Node, function_scope: Scope) -> bool:
  """
  Checks whether a function body depends on its own invocation.

  Arrow functions never do: `this`, `arguments` and `new.target` inside them
  belong to the enclosing function.

  Args:
      function_node: The function expression or arrow function.
      function_scope: The scope owned by `function_node`.

  Returns:
      bool: True if the body uses `this`, `super`, `new.target`, `arguments`
      or the function expression's own name.

  Raises:
      InternalRuleError: If `function_scope` does not belong to `function_node`.
  """
  if function_scope.block.id != function_node.id:
    raise InternalRuleError('"function_scope" should be the scope of "function_node".')

  if function_node.type == "arrow_function":
    return False

  if function_scope.this_found:
    return True

  arguments = function_scope.variables.get("arguments")
  if arguments is not None and arguments.implicit and arguments.references:
    return True

  name_scope = function_scope.upper
  if (
    name_scope is not None
    and name_scope.type is ScopeType.FUNCTION_EXPRESSION_NAME
    and name_scope.block.id == function_node.id
  ):
    if any(variable.references for variable in name_scope.variables.values()):
      return True

  return False


def has_hoisted_declarations(function_scope: Scope) -> bool:
  """
  Checks whether `var` or function declarations are hoisted into this scope.

  Inside a loop body such bindings would leak into (and persist across
  iterations of) the enclosing function.

  Args:
      function_scope: The callback's own function scope.
  """
  for variable in function_scope.variables.values():
    for definition in variable.defs:
      if definition.type is DefinitionType.VARIABLE and definition.kind == "var":
        return True
      if definition.type is DefinitionType.FUNCTION_NAME:
        return True
  return False
